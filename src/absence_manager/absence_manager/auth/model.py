from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..teachers.model import Teacher
from ..users.model import User


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: an admin/sg account or a teacher."""

    principal_id: str
    name: str
    email: str
    role: Role
    password_hash: str
    is_active: bool = True
    must_change_password: bool = False
    matricule: Optional[str] = None
    group_ids: tuple[str, ...] = ()

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            principal_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            password_hash=user.password_hash,
            is_active=user.is_active,
            must_change_password=user.must_change_password,
        )

    @classmethod
    def from_teacher(cls, teacher: Teacher) -> "Principal":
        return cls(
            principal_id=teacher.teacher_id,
            name=teacher.full_name,
            email=teacher.email,
            role=Role.TEACHER,
            password_hash=teacher.password_hash,
            is_active=teacher.is_active,
            must_change_password=teacher.must_change_password,
            matricule=teacher.matricule,
            group_ids=teacher.group_ids,
        )

    def to_public(self, *, group_names: Optional[list[str]] = None) -> dict:
        data = {
            "id": self.principal_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
        if self.role == Role.TEACHER:
            data["must_change_password"] = self.must_change_password
            data["matricule"] = self.matricule
            data["groups"] = group_names if group_names is not None else list(self.group_ids)
        return data
