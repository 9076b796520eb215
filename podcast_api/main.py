# ABOUTME: FastAPI application instance with middleware, exception handlers and static mounts
# ABOUTME: Main entry point; the lifespan builds the shared HTTP client and the injected services
from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from podcast_api.config import get_settings
from podcast_api.core.script_generator import ScriptGenerator
from podcast_api.core.speech_synthesizer import SpeechSynthesizer
from podcast_api.core.upload_stager import UploadStager
from podcast_api.logging_config import configure_logging, get_logger
from podcast_api.middleware import (
    TimeoutMiddleware,
    RateLimitMiddleware,
    LoggingMiddleware,
    EnhancedCORSMiddleware
)
from podcast_api.models.errors import InvalidInputError, StorageError, UpstreamError
from podcast_api.models.responses import ErrorResponse
from podcast_api.monitoring.metrics import PrometheusMetrics, route_label
from podcast_api.monitoring.middleware import add_monitoring_middleware, route_template
from podcast_api.routes import health, metrics, podcast, root
from podcast_api.utils.files import LazyStaticFiles, ensure_directory

UPLOADS_URL_PREFIX = "/uploads"
AUDIO_URL_PREFIX = "/audio"

# Fails fast when GEMINI_API_KEY is missing
settings = get_settings()
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting podcast generator service")

    PrometheusMetrics()
    ensure_directory(settings.uploads_dir)
    ensure_directory(settings.audio_dir)

    if not settings.synthesis_configured:
        logger.warning("ELEVENLABS_API_KEY not set - text-to-speech requests will fail upstream")

    http_client = httpx.AsyncClient(timeout=settings.upstream_timeout_sec)
    app.state.upload_stager = UploadStager(settings.uploads_dir)
    app.state.script_generator = ScriptGenerator(
        http_client,
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
    )
    app.state.speech_synthesizer = SpeechSynthesizer(
        http_client,
        api_key=settings.elevenlabs_api_key,
        voice_id=settings.elevenlabs_voice_id,
        output_dir=settings.audio_dir,
        url_prefix=AUDIO_URL_PREFIX,
        base_url=settings.elevenlabs_base_url,
    )
    logger.info(
        "Podcast generator service started",
        generation_model=settings.gemini_model,
        uploads_dir=settings.uploads_dir,
        audio_dir=settings.audio_dir,
    )

    try:
        yield
    finally:
        logger.info("Shutting down podcast generator service")
        await http_client.aclose()


app = FastAPI(
    title="AI Podcast Generator API",
    description="Turns transcripts and uploads into podcast scripts and speech",
    version="1.0.0",
    lifespan=lifespan
)

# Middleware stack - applied in reverse order of desired execution
# Order: CORS -> Monitoring -> Logging -> Rate Limiting -> Timeout -> Request Processing
app.add_middleware(
    TimeoutMiddleware,
    timeout_seconds=float(settings.timeout_sec)
)
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=settings.rate_limit_requests_per_minute
)
app.add_middleware(LoggingMiddleware)
add_monitoring_middleware(app)
app.add_middleware(EnhancedCORSMiddleware, allow_origins=settings.cors_allow_origins or None)


def _error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(code=code, message=message).model_dump(),
        headers={"X-Request-ID": getattr(request.state, "request_id", "")}
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Handle missing or blank input (400)"""
    logger.info("invalid_input", path=request.url.path, reason=str(exc))
    return _error_response(request, 400, "INVALID_INPUT", str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handle bodies that do not parse into the request schema (400)"""
    logger.info("invalid_request", path=request.url.path, errors=str(exc.errors()))
    return _error_response(request, 400, "INVALID_REQUEST", "Request body is invalid")


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """Handle remote AI service failures (500); details stay in the log"""
    logger.error(
        "upstream_failed",
        path=request.url.path,
        service=exc.service,
        upstream_status=exc.status_code,
        upstream_body=exc.body,
        error=str(exc),
    )
    PrometheusMetrics().record_error("UpstreamError", route_label(request.method, route_template(request)))
    if exc.service == "synthesis":
        message = "Failed to generate speech"
    else:
        message = "Failed to generate podcast script"
    return _error_response(request, 500, "UPSTREAM_ERROR", message)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Handle local filesystem failures (500)"""
    logger.error("storage_failed", path=request.url.path, file_path=exc.path, error=str(exc))
    PrometheusMetrics().record_error("StorageError", route_label(request.method, route_template(request)))
    return _error_response(request, 500, "STORAGE_ERROR", "Failed to store file")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle general HTTP exceptions"""
    return _error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


app.include_router(root.router, tags=["root"])
app.include_router(podcast.router, prefix="/api", tags=["podcast"])
app.include_router(health.router, tags=["health"])
app.include_router(metrics.router, tags=["monitoring"])

app.mount(
    UPLOADS_URL_PREFIX,
    LazyStaticFiles(directory=settings.uploads_dir),
    name="uploads"
)
app.mount(
    AUDIO_URL_PREFIX,
    LazyStaticFiles(directory=settings.audio_dir),
    name="audio"
)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "podcast_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
