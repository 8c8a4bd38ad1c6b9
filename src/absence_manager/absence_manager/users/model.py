from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Staff account (admin or sg).

    Plain data object; no DB access here.
    """

    user_id: str
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
    must_change_password: bool = False

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "is_active": self.is_active,
            "must_change_password": self.must_change_password,
        }
