# ABOUTME: CORS for the browser frontend, configured from CORS_ALLOW_ORIGINS
# ABOUTME: With no origins configured any origin may call the API, but without credentials

import os
from typing import List, Optional, Sequence

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from podcast_api.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_METHODS = ("GET", "POST", "OPTIONS")
ALLOWED_HEADERS = ("Accept", "Accept-Language", "Content-Language", "Content-Type", "X-Request-ID")
EXPOSED_HEADERS = ("X-Request-ID", "X-Process-Time", "X-RateLimit-Limit", "X-RateLimit-Window", "Retry-After")


def get_cors_origins_from_env() -> List[str]:
    """Comma-separated ``CORS_ALLOW_ORIGINS``; empty list when unset."""
    raw = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class EnhancedCORSMiddleware:
    """
    Starlette ``CORSMiddleware`` with the service's origin policy.

    The frontend is served from its own dev server, so an unconfigured
    deployment answers every origin with ``*``. Cookies and auth headers
    are only honoured for an explicit origin list.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origins: Optional[Sequence[str]] = None,
        max_age: int = 600,
    ):
        origins = list(allow_origins) if allow_origins is not None else get_cors_origins_from_env()
        if not origins:
            origins = ["*"]
            logger.warning("cors_allowing_any_origin")

        self.allow_origins = origins
        self.allow_credentials = "*" not in origins
        self.cors_middleware = CORSMiddleware(
            app,
            allow_origins=origins,
            allow_credentials=self.allow_credentials,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            expose_headers=EXPOSED_HEADERS,
            max_age=max_age,
        )
        logger.info(
            "cors_configured",
            allow_origins=origins,
            allow_credentials=self.allow_credentials,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.cors_middleware(scope, receive, send)
