"""Structured logging configuration."""

import logging
import sys
import time
import uuid

import structlog
from flask import g, request
from pythonjsonlogger import jsonlogger

# Loggers that are noisy at INFO and only interesting when something breaks
QUIET_LOGGERS = ["werkzeug", "sqlalchemy.engine"]


def setup_logging(app):
    """Configure structlog and stdlib logging for the app."""
    log_level = logging.DEBUG if app.debug else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if not app.debug
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if not app.debug:
        json_formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(json_formatter)
        handler.setLevel(log_level)

        app.logger.handlers = []
        app.logger.addHandler(handler)
        app.logger.setLevel(log_level)

        # Service modules log through logging.getLogger("unplug.services...")
        package_logger = logging.getLogger("unplug")
        package_logger.handlers = []
        package_logger.addHandler(handler)
        package_logger.setLevel(log_level)

        for logger_name in QUIET_LOGGERS:
            logger = logging.getLogger(logger_name)
            logger.handlers = []
            logger.addHandler(handler)
            logger.setLevel(logging.WARNING)

    @app.before_request
    def log_request_info():
        # Reuse the caller's X-Request-ID when given
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        g.request_start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
        )

    @app.after_request
    def log_response_info(response):
        if "request_id" in g:
            response.headers["X-Request-ID"] = g.request_id

        if "request_start_time" not in g or request.path == "/health":
            return response

        fields = {
            "endpoint": request.endpoint,
            "status_code": response.status_code,
            "duration_ms": round((time.time() - g.request_start_time) * 1000, 2),
        }

        # Refusal and failure codes from the JSON envelope (QUOTA_EXHAUSTED etc.)
        if response.status_code >= 400 and response.is_json:
            error = (response.get_json(silent=True) or {}).get("error")
            if isinstance(error, dict):
                fields["error_code"] = error.get("code")

        logger = structlog.get_logger()
        if response.status_code >= 500:
            logger.error("request_failed", **fields)
        else:
            logger.info("request_completed", **fields)

        return response

    return app
