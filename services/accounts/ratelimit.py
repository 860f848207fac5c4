"""
Rate Limiting
=============

In-process sliding-window rate limiter keyed by client address, with a
general API limit and a stricter limit for login attempts.

Version: 0.1.0
"""

import threading
import time
from collections import deque
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from warden.config import RateLimitSettings
from warden.logging import get_logger

logger = get_logger(__name__)


class SlidingWindowRateLimiter:
    """
    Count hits per key over a trailing window.

    Keys whose newest hit has left the window are swept at most once per
    window, so the table stays bounded by the clients seen in one window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, key: str, limit: int, window_seconds: float) -> bool:
        """Record a hit; return False if ``key`` is over ``limit``."""
        now = self.clock()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= limit:
                return False
            hits.append(now)
            return True

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("rate_limit_keys_swept", count=len(stale))

    @property
    def tracked_keys(self) -> int:
        """Number of client keys currently held."""
        return len(self._hits)

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over the configured thresholds with 429."""

    def __init__(
        self,
        app: ASGIApp,
        settings: RateLimitSettings,
        api_prefix: str = "",
        limiter: SlidingWindowRateLimiter | None = None,
    ) -> None:
        super().__init__(app)
        self.settings = settings
        self.api_prefix = api_prefix
        self.limiter = limiter if limiter is not None else SlidingWindowRateLimiter()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if not path.startswith(self.api_prefix) or path.endswith("/health"):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        window = self.settings.window_seconds

        if request.method == "POST" and path == f"{self.api_prefix}/login":
            if not self.limiter.hit(f"login:{client}", self.settings.login_max_requests, window):
                logger.warning("login_rate_limited", client=client)
                return JSONResponse(
                    status_code=429,
                    content={"error": "Too many login attempts, please try again later"},
                )

        if not self.limiter.hit(f"api:{client}", self.settings.max_requests, window):
            logger.warning("api_rate_limited", client=client, path=path)
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests, please try again later"},
            )

        return await call_next(request)
