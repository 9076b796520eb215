# ABOUTME: Middleware feeding request counts, durations and unhandled errors into PrometheusMetrics
# ABOUTME: Labels by matched route template so raw paths never become label values
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match
from starlette.types import ASGIApp

from podcast_api.logging_config import get_logger
from .metrics import PrometheusMetrics, route_label

logger = get_logger(__name__)

SCRAPE_PATH = "/metrics"


def route_template(request: Request) -> Optional[str]:
    """Path template of the route serving ``request``, or None when nothing matches.

    API routes give their declared path (``/api/text-to-speech``); static
    mounts give their mount point (``/audio``).
    """
    route = request.scope.get("route")
    if route is not None:
        return getattr(route, "path", None)

    router = getattr(request.scope.get("app"), "router", None)
    for candidate in getattr(router, "routes", ()):
        match, _ = candidate.matches(request.scope)
        if match != Match.NONE:
            return getattr(candidate, "path", None)
    return None


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Records every request under the label ``"<METHOD> <route template>"``."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.metrics = PrometheusMetrics()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == SCRAPE_PATH:
            return await call_next(request)

        # Matched before routing; mounts rewrite root_path in the shared scope
        method, template = request.method, route_template(request)
        status_code = 500
        start = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Process-Time"] = f"{time.perf_counter() - start:.4f}"
            return response
        except Exception as e:
            logger.error("unhandled_request_error", method=method, path=request.url.path, error=str(e))
            self.metrics.record_error(type(e).__name__, route_label(method, template))
            raise
        finally:
            elapsed = time.perf_counter() - start
            self.metrics.record_request(method, template, status_code)
            self.metrics.record_request_duration(method, template, status_code, elapsed)


def add_monitoring_middleware(app: FastAPI) -> None:
    app.add_middleware(MonitoringMiddleware)
