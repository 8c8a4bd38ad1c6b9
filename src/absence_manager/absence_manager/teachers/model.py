from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    first_name: str
    last_name: str
    email: str
    matricule: str
    password_hash: str
    must_change_password: bool = True
    is_active: bool = True
    group_ids: tuple[str, ...] = ()
    schedule_path: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_public(self, *, group_names: Optional[list[str]] = None) -> dict:
        return {
            "id": self.teacher_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "matricule": self.matricule,
            "must_change_password": self.must_change_password,
            "is_active": self.is_active,
            "schedule_path": self.schedule_path,
            "groups": group_names if group_names is not None else list(self.group_ids),
        }
