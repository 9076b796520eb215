# ABOUTME: HTTP middleware used by the podcast generator app
# ABOUTME: Request timeout, per-client rate limit, request logging and CORS

from .timeout import TimeoutMiddleware
from .rate_limit import RateLimitMiddleware, SlidingWindowLimiter, get_client_ip
from .logging import LoggingMiddleware
from .cors import EnhancedCORSMiddleware, get_cors_origins_from_env

__all__ = [
    "TimeoutMiddleware",
    "RateLimitMiddleware",
    "SlidingWindowLimiter",
    "LoggingMiddleware",
    "EnhancedCORSMiddleware",
    "get_client_ip",
    "get_cors_origins_from_env",
]
