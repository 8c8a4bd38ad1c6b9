from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.identifiers import new_id
from ..common.validators import (
    collect,
    parse_bool,
    require_email,
    require_min_length,
    require_non_empty,
    require_one_of,
)
from ..core.constants import MIN_USER_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import BadRequestError, DuplicateError, NotFoundError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_STAFF_ROLES = (Role.ADMIN.value, Role.SG.value)


class UserService:
    """Use case: manage admin/sg accounts (admin only)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def get(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create(
        self,
        *,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
    ) -> User:
        collect(
            lambda: require_non_empty(name, "name"),
            lambda: require_email(email),
            lambda: require_min_length(password, "password", MIN_USER_PASSWORD_LENGTH),
            lambda: require_one_of(role, "role", _STAFF_ROLES),
        )
        email = email.strip().lower()
        if self._users.get_by_email(email):
            raise DuplicateError("User already exists")

        user = User(
            user_id=new_id(),
            name=name.strip(),
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            must_change_password=True,
        )
        self._users.create(user)
        logger.info("User %s created with role %s", email, role)
        return user

    def update(self, user_id: str, data: dict[str, Any]) -> User:
        user = self.get(user_id)
        changes: dict[str, Any] = {}

        if data.get("name"):
            changes["name"] = require_non_empty(data["name"], "name")
        if data.get("email"):
            email = require_email(data["email"])
            other = self._users.get_by_email(email)
            if other and other.user_id != user.user_id:
                raise DuplicateError("User already exists")
            changes["email"] = email
        if data.get("role"):
            changes["role"] = Role(require_one_of(data["role"], "role", _STAFF_ROLES))
        if data.get("is_active") is not None:
            changes["is_active"] = parse_bool(data["is_active"], "is_active")
        if data.get("password"):
            require_min_length(data["password"], "password", MIN_USER_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(data["password"])
            changes["must_change_password"] = True

        updated = replace(user, **changes)
        self._users.update(updated)
        return updated

    def delete(self, user_id: str, *, current_user_id: str) -> None:
        user = self.get(user_id)
        if user.user_id == current_user_id:
            raise BadRequestError("Cannot delete yourself")
        self._users.delete_by_id(user.user_id)
        logger.info("User %s deleted", user.email)
