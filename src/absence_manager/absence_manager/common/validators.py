from __future__ import annotations

import re
from typing import Iterable, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import is_hhmm

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^[0-9+\-\s()]*$")


def _fail(field_name: str, message: str) -> ValidationError:
    return ValidationError(message, errors=[{"field": field_name, "message": message}])


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise _fail(field_name, f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise _fail(field_name, f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str], field_name: str = "email") -> str:
    value = require_non_empty(value, field_name).lower()
    if not EMAIL_RE.match(value):
        raise _fail(field_name, "Valid email is required")
    return value


def require_one_of(value: Optional[str], field_name: str, allowed: Iterable[str]) -> str:
    allowed = tuple(allowed)
    if value not in allowed:
        raise _fail(field_name, f"{field_name} must be one of: {', '.join(allowed)}")
    return value


def require_hhmm(value: Optional[str], field_name: str) -> str:
    if not is_hhmm(value):
        raise _fail(field_name, f"{field_name} must be a HH:mm time")
    return value.strip()


def parse_bool(value: object, field_name: str) -> bool:
    """Accept JSON booleans and the strings "true"/"false"; anything else is a 422."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise _fail(field_name, f"{field_name} must be true or false")


def optional_phone(value: Optional[str], field_name: str = "phone") -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    value = str(value).strip()
    if not PHONE_RE.match(value):
        raise _fail(field_name, "Invalid phone number format")
    return value


def collect(*checks) -> None:
    """Run zero-arg validation callables and raise one error listing every failing field."""
    errors: list[dict] = []
    for check in checks:
        try:
            check()
        except ValidationError as e:
            errors.extend(e.errors or [])
    if errors:
        raise ValidationError("Validation failed", errors=errors)
