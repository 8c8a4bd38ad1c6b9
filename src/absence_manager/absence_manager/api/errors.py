from __future__ import annotations

import logging

from flask import Flask, request
from werkzeug.exceptions import HTTPException, NotFound, RequestEntityTooLarge

from ..core.exceptions import DomainError, ScheduleConflictError
from .responses import fail

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ScheduleConflictError)
    def handle_conflict(e: ScheduleConflictError):
        return fail(e.message, status=e.status_code, conflicts=e.conflicts)

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return fail(e.message, status=e.status_code, errors=e.errors)

    @app.errorhandler(NotFound)
    def handle_unknown_route(e: NotFound):
        logger.warning("Unknown route %s %s", request.method, request.path)
        return fail(f"Route {request.path} not found", status=404)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e: RequestEntityTooLarge):
        return fail("Uploaded file is too large", status=413)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Internal server error: {e}", status=500)
        return fail("Internal server error", status=500)
