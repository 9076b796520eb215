# ABOUTME: Per-client request limit for the generation and synthesis routes
# ABOUTME: Sliding one-minute window kept in process memory; liveness, health and metrics are exempt

import time
from collections import deque
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from podcast_api.logging_config import get_logger
from podcast_api.models.responses import ErrorResponse

logger = get_logger(__name__)

WINDOW_SECONDS = 60
EXEMPT_PATHS = frozenset({"/", "/test", "/healthz", "/readyz", "/metrics"})


def get_client_ip(request: Request) -> str:
    """Best guess at the caller's address behind proxies."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop

    real_ip = request.headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


class SlidingWindowLimiter:
    """Allows ``limit`` hits per key within any ``window_seconds`` span.

    Each worker process keeps its own counters. Keys with no hit inside the
    window are dropped, at most once per window, so memory follows the
    number of recently active clients.
    """

    def __init__(self, limit: int, window_seconds: int = WINDOW_SECONDS):
        self.limit = limit
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._next_sweep = 0.0

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        self._next_sweep = now + self.window_seconds

    def acquire(self, key: str) -> float:
        """Record a hit for ``key``.

        Returns 0 when the hit is allowed, otherwise the number of seconds
        until the oldest hit leaves the window (the hit is not recorded).
        """
        now = time.monotonic()
        if now >= self._next_sweep:
            self._sweep(now)

        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.limit:
            return hits[0] + self.window_seconds - now

        hits.append(now)
        return 0.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects callers above ``requests_per_minute`` with 429.

    Each generation or synthesis request costs a paid upstream call, so
    everything outside ``EXEMPT_PATHS`` counts against the limit.
    """

    def __init__(self, app, requests_per_minute: int = 60):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.limiter = SlidingWindowLimiter(requests_per_minute)

    def _limit_headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.requests_per_minute),
            "X-RateLimit-Window": str(WINDOW_SECONDS),
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_ip = get_client_ip(request)
        wait_seconds = self.limiter.acquire(client_ip)

        if wait_seconds > 0:
            retry_after = max(1, int(wait_seconds))
            logger.warning(
                "rate_limit_exceeded",
                client_ip=client_ip,
                method=request.method,
                path=request.url.path,
                limit=self.requests_per_minute,
                retry_after=retry_after,
            )
            error = ErrorResponse(
                code="RATE_LIMIT_EXCEEDED",
                message=f"Rate limit exceeded. Maximum {self.requests_per_minute} requests per minute.",
                details={"limit": self.requests_per_minute, "retry_after_seconds": retry_after},
            )
            headers = self._limit_headers()
            headers["Retry-After"] = str(retry_after)
            headers["X-Request-ID"] = getattr(request.state, "request_id", "")
            return JSONResponse(status_code=429, content=error.model_dump(), headers=headers)

        response = await call_next(request)
        response.headers.update(self._limit_headers())
        return response
