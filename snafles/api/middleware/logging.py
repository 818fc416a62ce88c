"""
Access logging middleware.

One log line per request with:
- Correlation ID (X-Request-ID, generated when the client sends none)
- Latency, status and the principal that made the call
- Credentials stripped from headers and JSON bodies
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Set

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


REDACTED = "[REDACTED]"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("snafles.api")


@dataclass
class LoggingConfig:
    """Access log settings."""

    enabled: bool = True

    # Bodies are only logged in debug mode
    log_request_body: bool = False
    max_body_bytes: int = 10_000

    quiet_paths: Set[str] = field(default_factory=lambda: {
        "/api/health",
        "/favicon.ico",
    })

    secret_headers: Set[str] = field(default_factory=lambda: {
        "authorization",
        "cookie",
        "set-cookie",
    })

    # Body keys to redact (compared lower-cased)
    redacted_fields: Set[str] = field(default_factory=lambda: {
        "password",
        "currentpassword",
        "newpassword",
        "token",
        "secret",
        "access_token",
    })

    slow_threshold_ms: float = 2000.0

    request_id_header: str = "X-Request-ID"


def get_request_id() -> str:
    """Correlation ID of the request being handled, or ''."""
    return request_id_var.get()


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per log line."""

    EXTRA_FIELDS = ("request", "status_code", "duration_ms", "principal")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id

        entry.update({
            name: getattr(record, name)
            for name in self.EXTRA_FIELDS
            if hasattr(record, name)
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def redact_sensitive_data(
    data: Any,
    redacted_fields: Set[str],
    replacement: str = REDACTED,
) -> Any:
    """Recursively replace the values of sensitive keys in JSON-like data."""
    if isinstance(data, list):
        return [redact_sensitive_data(item, redacted_fields, replacement) for item in data]
    if not isinstance(data, dict):
        return data
    return {
        key: replacement if key.lower() in redacted_fields
        else redact_sensitive_data(value, redacted_fields, replacement)
        for key, value in data.items()
    }


def _principal(request: Request) -> Optional[str]:
    # Set by get_current_user once a token resolves
    user = getattr(request.state, "user", None)
    if user is None:
        return None
    return f"{user.role.value}:{user.id}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes an access log entry for every request."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    def _safe_headers(self, request: Request) -> dict:
        secret = self.config.secret_headers
        return {
            name: REDACTED if name.lower() in secret else value
            for name, value in request.headers.items()
        }

    async def _body_for_log(self, request: Request) -> Optional[str]:
        raw = await request.body()
        if not raw:
            return None
        if len(raw) > self.config.max_body_bytes:
            return f"<{len(raw)} bytes>"
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "<non-JSON body>"
        return json.dumps(redact_sensitive_data(parsed, self.config.redacted_fields))

    def _level_for(self, status_code: int, duration_ms: float) -> int:
        if status_code >= 500:
            return logging.ERROR
        if status_code >= 400 or duration_ms > self.config.slow_threshold_ms:
            return logging.WARNING
        return logging.INFO

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        header = self.config.request_id_header
        request_id = request.headers.get(header) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)

        quiet = not self.config.enabled or request.url.path in self.config.quiet_paths
        if quiet:
            response = await call_next(request)
            response.headers[header] = request_id
            return response

        details = {
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query or None,
            "headers": self._safe_headers(request),
            "client_ip": request.client.host if request.client else None,
        }
        if self.config.log_request_body:
            body = await self._body_for_log(request)
            if body:
                details["body"] = body

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[header] = request_id

        principal = _principal(request)
        summary = f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)"
        if principal:
            summary = f"{summary} as {principal}"
        if duration_ms > self.config.slow_threshold_ms:
            summary = f"[SLOW] {summary}"

        logger.log(
            self._level_for(response.status_code, duration_ms),
            summary,
            extra={
                "request": details,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "principal": principal,
            },
        )
        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the access log middleware.

    Args:
        app: FastAPI application instance.
        config: Access log settings.
        structured: Emit JSON lines on the ``snafles`` logger instead of
            the plain basicConfig format.
    """
    config = config or LoggingConfig()

    if structured:
        root = logging.getLogger("snafles")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in root.handlers):
            json_handler = logging.StreamHandler()
            json_handler.setFormatter(StructuredLogFormatter())
            root.addHandler(json_handler)
        # basicConfig already put a plain handler on the root logger
        root.propagate = False
        root.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config)
