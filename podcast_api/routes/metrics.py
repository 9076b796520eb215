# ABOUTME: Prometheus scrape endpoint plus a small JSON summary of the collected metrics
# ABOUTME: Implements GET /metrics (exposition format) and GET /metrics/health
from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from podcast_api.logging_config import get_logger
from podcast_api.monitoring.metrics import PrometheusMetrics

logger = get_logger(__name__)

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def get_metrics():
    """Every registered metric in Prometheus text format."""
    try:
        payload = generate_latest(REGISTRY)
    except Exception as e:
        logger.error("metrics_render_failed", error=str(e))
        return Response("# metrics unavailable\n", status_code=500, media_type=CONTENT_TYPE_LATEST)
    return Response(payload, media_type=CONTENT_TYPE_LATEST)


@router.get("/metrics/health")
async def get_metrics_health():
    metrics = PrometheusMetrics()
    return {
        "status": "ok",
        "metrics_initialized": getattr(metrics, "_initialized", False),
        "metrics_summary": metrics.get_metrics_summary(),
    }
