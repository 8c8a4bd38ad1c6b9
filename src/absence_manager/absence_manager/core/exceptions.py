from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class BadRequestError(DomainError):
    """Raised when a request is missing required input."""


class DuplicateError(DomainError):
    """Raised when a unique key (cef, email, name, ...) is already taken."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 422


class NotFoundError(DomainError):
    """Raised when an entity lookup by id / cef / name fails."""

    status_code = 404


class ScheduleConflictError(DomainError):
    """Raised when proposed sessions overlap existing active schedules."""

    status_code = 409

    def __init__(self, message: str, *, conflicts: list[dict]):
        super().__init__(message)
        self.conflicts = conflicts


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""

    status_code = 403
