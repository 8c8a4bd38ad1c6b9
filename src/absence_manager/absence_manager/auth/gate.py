from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..teachers.repository import TeacherRepository
from ..users.repository import UserRepository
from .model import Principal
from .tokens import TokenService


def bearer_token(header: Optional[str]) -> Optional[str]:
    if not header or not header.startswith("Bearer"):
        return None
    parts = header.split(" ", 1)
    if len(parts) != 2 or not parts[1].strip():
        return None
    return parts[1].strip()


class AccessGate:
    """Bearer token -> principal -> role allow-list.

    Resolution looks in the admin/sg accounts first, then in teachers; both use
    globally unique ids so one token namespace serves the two stores.
    """

    def __init__(self, users: UserRepository, teachers: TeacherRepository, tokens: TokenService):
        self._users = users
        self._teachers = teachers
        self._tokens = tokens

    def resolve(self, authorization: Optional[str]) -> Principal:
        token = bearer_token(authorization)
        if not token:
            raise AuthenticationError("Not authorized to access this route")

        principal_id = self._tokens.subject(token)

        user = self._users.get_by_id(principal_id)
        if user:
            return Principal.from_user(user)
        teacher = self._teachers.get_by_id(principal_id)
        if teacher:
            return Principal.from_teacher(teacher)
        raise AuthenticationError("User no longer exists")

    @staticmethod
    def check(principal: Principal, roles: tuple[Role, ...]) -> None:
        if principal.role not in roles:
            raise AuthorizationError(f"User role '{principal.role.value}' is not authorized to access this route")
        if principal.role != Role.ADMIN and not principal.is_active:
            raise AuthorizationError("This account is inactive")

    def authenticated(self, view):
        """Require a valid token; the principal is exposed as `flask.g.principal`."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            g.principal = self.resolve(request.headers.get("Authorization"))
            return view(*args, **kwargs)

        return wrapper

    def authorize(self, *roles: Role):
        """Require a valid token whose active principal holds one of `roles`."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                principal = self.resolve(request.headers.get("Authorization"))
                self.check(principal, roles)
                g.principal = principal
                return view(*args, **kwargs)

            return wrapper

        return decorator
