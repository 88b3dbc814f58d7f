"""
Structured Logging Middleware

Every log line emitted while a request is being served carries the request
id and, once the bearer token has resolved, the acting user's id, role and
website ids. An authorization denial logged deep inside a service can then
be traced back to the request and tenant that caused it.

The access log itself is one line per request on ``tenantcms.access_log``.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
acting_user_var: ContextVar[dict | None] = ContextVar("acting_user", default=None)

ACCESS_LOGGER_NAME = "tenantcms.access_log"

_PAYLOAD_FIELDS = (
    "request_id",
    "user_id",
    "role",
    "website_ids",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
)
_QUIET_PATHS = frozenset({"/health"})
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s user=%(user_id)s] %(message)s"


def describe_user(user: Any) -> dict:
    """Log fields identifying ``user`` and the websites it acts for."""
    return {
        "user_id": user.id,
        "role": user.role or "-",
        "website_ids": sorted(website.id for website in user.websites),
    }


def bind_acting_user(request: Request, user: Any) -> None:
    """Record the authenticated user for the rest of the request."""
    acting_user = describe_user(user)
    request.state.acting_user = acting_user
    acting_user_var.set(acting_user)


class RequestContextFilter(logging.Filter):
    """Copy the request id and acting user onto records that lack them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get() or "-"
        for key, value in (acting_user_var.get() or {"user_id": "-"}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in _PAYLOAD_FIELDS
            if getattr(record, key, "-") not in ("-", None)
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For") or request.headers.get("X-Real-IP")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger_name: str = ACCESS_LOGGER_NAME):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request_id_var.set(request_id)
        acting_user_var.set(None)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            self._access_log(request, request_id, 500, started, error=e)
            raise

        response.headers["X-Request-ID"] = request_id
        self._access_log(request, request_id, response.status_code, started)
        return response

    def _access_log(
        self,
        request: Request,
        request_id: str,
        status_code: int,
        started: float,
        error: Exception | None = None,
    ) -> None:
        if request.url.path in _QUIET_PATHS:
            return

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "client_ip": _client_ip(request),
        }
        # The user is resolved downstream, so it is read back from request state
        acting_user = getattr(request.state, "acting_user", None)
        if acting_user is not None:
            extra.update(acting_user)

        message = f"{request.method} {request.url.path} -> {status_code} in {duration_ms}ms"
        if error is not None:
            message = f"{message} ({type(error).__name__}: {error})"
        self.logger.log(_level_for_status(status_code), message, extra=extra)


def setup_structured_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit one JSON object per line instead of plain text
    """
    level = logging.getLevelName(log_level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("tenantcms").setLevel(level)
    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
