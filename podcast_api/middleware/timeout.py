# ABOUTME: Bounds the total time of a request (upload, generation call, synthesis stream)
# ABOUTME: Answers 408 with an ErrorResponse when the bound is hit; health checks are never cut off

import asyncio
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from podcast_api.logging_config import get_logger
from podcast_api.models.responses import ErrorResponse

logger = get_logger(__name__)

UNBOUNDED_PATHS = frozenset({"/healthz", "/readyz"})


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Cancels the downstream handler after ``timeout_seconds``."""

    def __init__(self, app, timeout_seconds: float = 300.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in UNBOUNDED_PATHS:
            return await call_next(request)

        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            pass

        request_id = (
            getattr(request.state, "request_id", None)
            or request.headers.get("X-Request-ID")
            or ""
        )
        logger.warning(
            "request_timed_out",
            method=request.method,
            path=request.url.path,
            timeout_seconds=self.timeout_seconds,
        )
        error = ErrorResponse(
            code="REQUEST_TIMEOUT",
            message=f"Request timed out after {self.timeout_seconds} seconds",
        )
        return JSONResponse(status_code=408, content=error.model_dump(), headers={"X-Request-ID": request_id})
