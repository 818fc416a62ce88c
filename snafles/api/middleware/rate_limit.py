"""
Rate limiting middleware.

Fixed-window limiting per client IP: at most ``max_requests`` in every
``window_seconds`` window. State is held in memory, so limits are per
process.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from snafles.api.dependencies import get_client_ip
from snafles.api.middleware.error_handler import create_error_response
from snafles.errors import RateLimitError

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    max_requests: int = 100
    window_seconds: int = 15 * 60
    enabled: bool = True

    excluded_paths: list = field(default_factory=lambda: [
        "/api/health",
        "/docs",
        "/openapi.json",
        "/redoc",
    ])


@dataclass
class WindowState:
    """Request count for one client in the current window."""
    window_start: float
    count: int = 0


class FixedWindowRateLimiter:
    """In-memory fixed-window counter keyed by client identifier."""

    def __init__(self, config: RateLimitConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self._clock = clock
        self._windows: Dict[str, WindowState] = {}
        self._lock = asyncio.Lock()

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, state in self._windows.items()
            if now - state.window_start >= self.config.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    async def hit(self, identifier: str) -> Tuple[bool, int, float]:
        """
        Record one request.

        Returns:
            (allowed, remaining, seconds until the window resets)
        """
        async with self._lock:
            now = self._clock()
            self._evict_expired(now)

            state = self._windows.setdefault(identifier, WindowState(window_start=now))
            reset_in = state.window_start + self.config.window_seconds - now

            if state.count >= self.config.max_requests:
                return False, 0, reset_in

            state.count += 1
            return True, self.config.max_requests - state.count, reset_in


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients that exceed their window with 429."""

    def __init__(
        self,
        app: FastAPI,
        config: Optional[RateLimitConfig] = None,
        limiter: Optional[FixedWindowRateLimiter] = None,
    ):
        super().__init__(app)
        self.config = config or RateLimitConfig()
        self.limiter = limiter or FixedWindowRateLimiter(self.config)

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.config.excluded_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.config.enabled or self._is_excluded(request.url.path):
            return await call_next(request)

        identifier = f"ip:{get_client_ip(request)}"
        allowed, remaining, reset_in = await self.limiter.hit(identifier)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {identifier} on {request.url.path}")
            error = RateLimitError(self.config.max_requests, self.config.window_seconds)
            return create_error_response(
                message=error.message,
                code=error.code,
                status_code=error.status_code,
                headers={
                    "Retry-After": str(int(reset_in) + 1),
                    "X-Rate-Limit-Remaining": "0",
                    "X-Rate-Limit-Reset": str(int(time.time() + reset_in)),
                },
            )

        response = await call_next(request)
        response.headers["X-Rate-Limit-Remaining"] = str(remaining)
        response.headers["X-Rate-Limit-Reset"] = str(int(time.time() + reset_in))
        return response


def setup_rate_limiting(
    app: FastAPI,
    config: Optional[RateLimitConfig] = None,
) -> FixedWindowRateLimiter:
    """
    Configure rate limiting middleware for the FastAPI application.

    Returns:
        The limiter instance.
    """
    if config is None:
        config = RateLimitConfig()

    limiter = FixedWindowRateLimiter(config)
    app.add_middleware(RateLimitMiddleware, config=config, limiter=limiter)
    return limiter
