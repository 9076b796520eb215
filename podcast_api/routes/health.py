# ABOUTME: Health check API routes
# ABOUTME: Implements /healthz and /readyz endpoints for service monitoring
from fastapi import APIRouter

from podcast_api.config import get_settings
from podcast_api.models.responses import HealthStatus, ReadinessStatus

router = APIRouter()


@router.get("/healthz", response_model=HealthStatus)
async def health_check():
    """
    Basic health check - service is running
    """
    return HealthStatus(status="ok")


@router.get("/readyz", response_model=ReadinessStatus)
async def readiness_check():
    """
    Readiness check - service is ready to handle requests

    Generation needs its credential to be ready; synthesis is reported
    separately because the service still works without it.
    """
    settings = get_settings()
    generation_configured = bool(settings.gemini_api_key)

    return ReadinessStatus(
        ready=generation_configured,
        generation_configured=generation_configured,
        synthesis_configured=settings.synthesis_configured,
        generation_model=settings.gemini_model,
        uploads_dir=settings.uploads_dir,
        audio_dir=settings.audio_dir,
    )
