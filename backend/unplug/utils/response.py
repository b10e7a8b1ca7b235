"""JSON envelope for API responses.

Every body is ``{"success": true, "data": ...}`` or
``{"success": false, "error": {"code", "message", "details"?}}``.
"""

from typing import Any

from flask import jsonify


def success_response(
    data: Any = None, message: str | None = None, status_code: int = 200
):
    response = {"success": True}

    if data is not None:
        response["data"] = data

    if message is not None:
        response["message"] = message

    return jsonify(response), status_code


def error_response(
    code: str, message: str, details: dict | None = None, status_code: int = 400
):
    response = {"success": False, "error": {"code": code, "message": message}}

    if details is not None:
        response["error"]["details"] = details

    return jsonify(response), status_code


def unauthorized(message: str = "Unauthorized"):
    return error_response("UNAUTHORIZED", message, status_code=401)


def forbidden(message: str = "Admin access required"):
    return error_response("FORBIDDEN", message, status_code=403)


def not_found(message: str = "Resource not found"):
    return error_response("NOT_FOUND", message, status_code=404)


def validation_error(details: dict):
    """400 with per-field messages in ``details``."""
    return error_response(
        "VALIDATION_ERROR", "Invalid input data", details, status_code=400
    )


def conflict(message: str = "Resource conflict", details: dict | None = None):
    return error_response("CONFLICT", message, details, status_code=409)


# Refusals reported by the gacha services


def quota_exhausted(requested: int):
    """429: no draws left today. Told apart from rate limiting by its code."""
    return error_response(
        "QUOTA_EXHAUSTED",
        "No draws left today",
        {"requested": requested, "remaining": 0},
        status_code=429,
    )


def mission_on_cooldown(available_at: str):
    """409: the mission type was completed within the last 24 hours."""
    return error_response(
        "MISSION_ON_COOLDOWN",
        "Mission already completed within the last 24 hours",
        {"available_at": available_at},
        status_code=409,
    )


# Failures raised by the gacha services


def service_unavailable(code: str, message: str):
    """503: storage or usage measurement failed; the client may retry."""
    return error_response(code, message, status_code=503)


def server_error(message: str = "Internal server error", code: str = "SERVER_ERROR"):
    return error_response(code, message, status_code=500)
