"""Per-client fixed-window request limiting."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from quizzer.constants.network_constants import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)

_SWEEP_THRESHOLD = 1024


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answers 429 once a client IP exceeds ``max_requests`` within one window."""

    def __init__(
        self,
        app,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = _SWEEP_THRESHOLD,
    ) -> None:
        super().__init__(app)
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = Lock()
        self._sweep_threshold = sweep_threshold

    def _allow(self, client_key: str) -> bool:
        now = self._clock()
        with self._lock:
            if len(self._windows) >= self._sweep_threshold:
                self._drop_expired(now)
            window_start, count = self._windows.get(client_key, (now, 0))
            if now - window_start >= self._window_seconds:
                window_start, count = now, 0
            count += 1
            self._windows[client_key] = (window_start, count)
            return count <= self._max_requests

    def _drop_expired(self, now: float) -> None:
        expired = [
            key for key, (window_start, _count) in self._windows.items()
            if now - window_start >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    async def dispatch(self, request: Request, call_next):
        client_key = request.client.host if request.client else "unknown"
        if not self._allow(client_key):
            logger.warning("Rate limit exceeded for %s on %s", client_key, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"message": "Too many requests, please try again later."},
            )
        return await call_next(request)
