"""Utility functions."""

from unplug.utils.response import (
    conflict,
    error_response,
    forbidden,
    mission_on_cooldown,
    not_found,
    quota_exhausted,
    server_error,
    service_unavailable,
    success_response,
    unauthorized,
    validation_error,
)

__all__ = [
    "success_response",
    "error_response",
    "unauthorized",
    "forbidden",
    "not_found",
    "validation_error",
    "conflict",
    "quota_exhausted",
    "mission_on_cooldown",
    "service_unavailable",
    "server_error",
]
