from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import MIN_TEACHER_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, BadRequestError, NotFoundError
from ..groups.repository import GroupRepository
from ..teachers.repository import TeacherRepository
from ..users.repository import UserRepository
from .model import Principal
from .tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "The provided credentials are incorrect"


def password_matches(password_hash: str, password: Optional[str]) -> bool:
    if not password_hash or password is None:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # placeholder or corrupted hashes
        return False


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: dict


class AuthService:
    """Use cases: login, change password, current profile."""

    def __init__(
        self,
        users: UserRepository,
        teachers: TeacherRepository,
        groups: GroupRepository,
        tokens: TokenService,
    ):
        self._users = users
        self._teachers = teachers
        self._groups = groups
        self._tokens = tokens

    def _group_names(self, principal: Principal) -> list[str]:
        return [g.name for g in self._groups.list_by_ids(list(principal.group_ids))]

    def profile(self, principal: Principal) -> dict:
        if principal.role == Role.TEACHER:
            return principal.to_public(group_names=self._group_names(principal))
        return principal.to_public()

    def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        if not email or not password:
            raise BadRequestError("Please provide email and password")
        email = email.strip().lower()

        principal: Optional[Principal] = None
        user = self._users.get_by_email(email)
        if user and password_matches(user.password_hash, password):
            principal = Principal.from_user(user)
        else:
            teacher = self._teachers.get_by_email(email)
            if teacher and password_matches(teacher.password_hash, password):
                principal = Principal.from_teacher(teacher)

        if principal is None:
            logger.warning("Failed login for %s", email)
            raise AuthenticationError(
                INVALID_CREDENTIALS,
                errors=[{"field": "email", "message": INVALID_CREDENTIALS}],
            )

        if principal.role != Role.ADMIN and not principal.is_active:
            logger.warning("Login refused for inactive account %s", email)
            raise AuthorizationError("This account is inactive by admin")

        logger.info("Login successful for %s (%s)", email, principal.role.value)
        return LoginResult(token=self._tokens.issue(principal.principal_id), user=self.profile(principal))

    def change_password(
        self,
        principal: Principal,
        *,
        current_password: Optional[str],
        new_password: Optional[str],
        new_password_confirmation: Optional[str],
    ) -> None:
        if not current_password or not new_password or not new_password_confirmation:
            raise BadRequestError("Please provide all required fields")
        if new_password != new_password_confirmation:
            raise BadRequestError(
                "New password confirmation does not match",
                errors=[
                    {"field": "new_password_confirmation", "message": "The password confirmation does not match"}
                ],
            )
        if len(new_password) < MIN_TEACHER_PASSWORD_LENGTH:
            raise BadRequestError(
                f"New password must be at least {MIN_TEACHER_PASSWORD_LENGTH} characters",
                errors=[
                    {
                        "field": "new_password",
                        "message": f"The password must be at least {MIN_TEACHER_PASSWORD_LENGTH} characters",
                    }
                ],
            )

        if principal.role == Role.TEACHER:
            teacher = self._teachers.get_by_id(principal.principal_id)
            if not teacher:
                raise NotFoundError("User not found")
            self._require_current(teacher.password_hash, current_password)
            self._teachers.update(
                replace(teacher, password_hash=generate_password_hash(new_password), must_change_password=False)
            )
        else:
            user = self._users.get_by_id(principal.principal_id)
            if not user:
                raise NotFoundError("User not found")
            self._require_current(user.password_hash, current_password)
            self._users.update(replace(user, password_hash=generate_password_hash(new_password)))

        logger.info("Password changed for %s", principal.email)

    @staticmethod
    def _require_current(password_hash: str, current_password: str) -> None:
        if not password_matches(password_hash, current_password):
            raise BadRequestError(
                "Current password is incorrect",
                errors=[{"field": "current_password", "message": "The current password is incorrect"}],
            )
