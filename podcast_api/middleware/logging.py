# ABOUTME: Per-request logging middleware: assigns or echoes X-Request-ID and logs each request
# ABOUTME: The request ID is bound into the structlog context so service log lines carry it too

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from podcast_api.logging_config import get_logger, log_request_metrics, request_id_context
from podcast_api.middleware.rate_limit import get_client_ip

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("podcast_api.requests")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs ``request_start`` and ``request_complete`` (or ``request_error``)
    for every request and reports its timing through ``log_request_metrics``.

    Handlers read the ID from ``request.state.request_id``; the response
    always carries it back in ``X-Request-ID``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        client_ip = get_client_ip(request)
        path = request.url.path

        with request_id_context(request_id):
            logger.info(
                "request_start",
                method=request.method,
                path=path,
                client_ip=client_ip,
                content_type=request.headers.get("Content-Type"),
                content_length=request.headers.get("Content-Length"),
            )

            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_error",
                    method=request.method,
                    path=path,
                    duration_ms=_elapsed_ms(start),
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

            duration_ms = _elapsed_ms(start)
            log = getattr(logger, self.get_log_level(response.status_code))
            log(
                "request_complete",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            log_request_metrics(
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                request_id=request_id,
                additional_data={"client_ip": client_ip},
            )

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response

    @staticmethod
    def get_log_level(status_code: int) -> str:
        """5xx is an error, 4xx a warning, anything else info."""
        if status_code >= 500:
            return "error"
        if status_code >= 400:
            return "warning"
        return "info"
