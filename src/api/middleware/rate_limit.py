"""
Per-client rate limiting for ``/api/`` routes.

A fixed-window counter keyed by client address, held in process memory.
Responses carry ``RateLimit-Limit`` / ``RateLimit-Remaining`` /
``RateLimit-Reset`` headers; exhausted clients get a 429 envelope.
"""

import asyncio
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from src.api.middleware.error_handler import error_envelope
from src.core.exceptions import RateLimitExceededError


@dataclass
class RateLimitDecision:
    """Outcome of counting one request against a client's window."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class FixedWindowRateLimiter:
    """Counts requests per key inside fixed windows of ``window_seconds``."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        """Drop windows that have expired; runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._windows = {
            key: window
            for key, window in self._windows.items()
            if now - window[0] < self.window_seconds
        }
        self._last_sweep = now

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    async def hit(self, key: str) -> RateLimitDecision:
        """Record one request for ``key`` and decide whether it may proceed."""
        async with self._lock:
            now = self._clock()
            self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)

        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=max(0.0, self.window_seconds - (now - started)),
        )

    async def reset(self) -> None:
        async with self._lock:
            self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply ``FixedWindowRateLimiter`` to every request under ``/api/``."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        client_key = request.client.host if request.client else "unknown"
        decision = await self.limiter.hit(client_key)
        headers = {
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": str(math.ceil(decision.reset_after)),
        }

        if not decision.allowed:
            return JSONResponse(
                status_code=429,
                content=error_envelope(RateLimitExceededError()),
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
