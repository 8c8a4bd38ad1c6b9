from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from ..core.constants import DEFAULT_JWT_EXPIRES_HOURS
from ..core.exceptions import AuthenticationError

ALGORITHM = "HS256"


class TokenService:
    """Signed, time-limited bearer tokens carrying a principal id in the `id` claim."""

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_JWT_EXPIRES_HOURS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))

    def issue(self, principal_id: str, *, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {"id": principal_id, "iat": now, "exp": now + self._expires}
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def subject(self, token: str) -> str:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError as e:
            raise AuthenticationError("Not authorized to access this route") from e

        principal_id = claims.get("id")
        if not principal_id:
            raise AuthenticationError("Not authorized to access this route")
        return str(principal_id)
