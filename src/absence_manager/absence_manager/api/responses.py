from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, request


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra: Any):
    """JSON success envelope: {success: true, data?, message?, ...extra}."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return jsonify(body), status


def created(data: Any = None, *, message: Optional[str] = None):
    return ok(data, message=message, status=201)


def fail(message: str, *, status: int, errors: Optional[list] = None, **extra: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    """Request JSON object, or {} when the body is missing or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
