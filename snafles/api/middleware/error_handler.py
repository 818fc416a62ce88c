"""
Error Handling Middleware for Snafles

Centralized error handling:
- Standard ``{"message", "code"}`` error envelope
- Logging of errors
- Exception translation (taxonomy, HTTP errors, validation, unhandled)
"""

import traceback
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from snafles.errors import SnaflesException


INTERNAL_MESSAGE = "Something went wrong!"


def create_error_response(
    message: str,
    code: str,
    status_code: int,
    headers: Optional[dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    """Create standardized error response."""
    content = {"message": message, "code": code}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _auth_headers(status_code: int) -> Optional[dict[str, str]]:
    if status_code == 401:
        return {"WWW-Authenticate": "Bearer"}
    return None


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
    )
    # Detail only leaves the process in development
    return create_error_response(
        message=INTERNAL_MESSAGE,
        code="INTERNAL_ERROR",
        status_code=500,
        error=str(exc) if _is_development(request) else "Internal server error",
    )


async def error_handler_middleware(
    request: Request,
    call_next: Callable,
) -> Response:
    """
    Global error handling middleware.

    Catches anything the route-level handlers did not translate and
    returns a 500 envelope.
    """
    try:
        return await call_next(request)
    except Exception as e:
        return _internal_error(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(SnaflesException)
    async def snafles_exception_handler(request: Request, exc: SnaflesException):
        logger.warning(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message}"
            + (f" ({exc.detail})" if exc.detail else "")
        )
        return create_error_response(
            message=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            headers=_auth_headers(exc.status_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return create_error_response(
            message="Validation Error",
            code="VALIDATION_ERROR",
            status_code=400,
            errors=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message, code = "Route not found", "NOT_FOUND"
        else:
            message, code = str(exc.detail), f"HTTP_{exc.status_code}"
        return create_error_response(
            message=message,
            code=code,
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        return _internal_error(request, exc)
