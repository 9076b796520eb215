# ABOUTME: Prometheus metrics for the podcast generator service
# ABOUTME: Request, upstream-call, error and file-write counters behind one process-wide singleton
from threading import Lock
from typing import Any, Dict, Optional

from prometheus_client import REGISTRY, Counter, Histogram

from podcast_api.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_BUCKETS = (0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)
# Generation and synthesis calls routinely take tens of seconds
UPSTREAM_BUCKETS = (0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0)
UNMATCHED_ROUTE = "unmatched"


def route_label(method: str, template: Optional[str]) -> str:
    """Metric label for a request; every unrouted path shares one label."""
    if template is None:
        return UNMATCHED_ROUTE
    return f"{method} {template}"


def _counter_total(counter: Counter) -> float:
    return sum(
        sample.value
        for metric in counter.collect()
        for sample in metric.samples
        if sample.name.endswith("_total")
    )


class PrometheusMetrics:
    """
    Process-wide metrics registry for the podcast API.

    Metrics register once with the default prometheus registry; every later
    ``PrometheusMetrics()`` returns the same object. Recording never raises:
    a broken metric is logged and the request carries on.
    """

    _instance: Optional['PrometheusMetrics'] = None
    _lock = Lock()

    def __new__(cls) -> 'PrometheusMetrics':
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, '_initialized', False):
            return

        self.requests_total = Counter(
            'podcast_requests_total',
            'HTTP requests handled, by route and status',
            ['route', 'status'],
            registry=REGISTRY
        )
        self.request_duration_seconds = Histogram(
            'podcast_request_duration_seconds',
            'HTTP request duration in seconds',
            ['route', 'status'],
            buckets=REQUEST_BUCKETS,
            registry=REGISTRY
        )
        self.upstream_requests_total = Counter(
            'podcast_upstream_requests_total',
            'Calls to the remote generation and synthesis services',
            ['service', 'outcome'],
            registry=REGISTRY
        )
        self.upstream_duration_seconds = Histogram(
            'podcast_upstream_duration_seconds',
            'Remote service call duration in seconds',
            ['service'],
            buckets=UPSTREAM_BUCKETS,
            registry=REGISTRY
        )
        self.errors_total = Counter(
            'podcast_errors_total',
            'Errors by type and route',
            ['error_type', 'route'],
            registry=REGISTRY
        )
        self.files_written_total = Counter(
            'podcast_files_written_total',
            'Files written to disk (staged uploads, generated audio)',
            ['kind'],
            registry=REGISTRY
        )
        self.bytes_written_total = Counter(
            'podcast_bytes_written_total',
            'Bytes written to disk',
            ['kind'],
            registry=REGISTRY
        )

        self._initialized = True
        logger.info("metrics_registered")

    def record_request(self, method: str, template: Optional[str], status_code: int) -> None:
        try:
            self.requests_total.labels(route=route_label(method, template), status=str(status_code)).inc()
        except Exception as e:
            logger.error("metric_record_failed", metric="requests_total", error=str(e))

    def record_request_duration(self, method: str, template: Optional[str], status_code: int,
                                duration: float) -> None:
        try:
            self.request_duration_seconds.labels(
                route=route_label(method, template), status=str(status_code)
            ).observe(duration)
        except Exception as e:
            logger.error("metric_record_failed", metric="request_duration_seconds", error=str(e))

    def record_upstream_call(self, service: str, outcome: str, duration: float) -> None:
        """Count one remote call.

        Args:
            service: "generation" or "synthesis"
            outcome: "success", "error" or "timeout"
            duration: Wall time of the call in seconds
        """
        try:
            self.upstream_requests_total.labels(service=service, outcome=outcome).inc()
            self.upstream_duration_seconds.labels(service=service).observe(duration)
        except Exception as e:
            logger.error("metric_record_failed", metric="upstream_requests_total", error=str(e))

    def record_file_written(self, kind: str, size_bytes: int) -> None:
        """Count a file persisted to disk; ``kind`` is "upload" or "audio"."""
        try:
            self.files_written_total.labels(kind=kind).inc()
            self.bytes_written_total.labels(kind=kind).inc(size_bytes)
        except Exception as e:
            logger.error("metric_record_failed", metric="files_written_total", error=str(e))

    def record_error(self, error_type: str, route: str = "unknown") -> None:
        try:
            self.errors_total.labels(error_type=error_type, route=route).inc()
        except Exception as e:
            logger.error("metric_record_failed", metric="errors_total", error=str(e))

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Totals across all label sets, for the JSON health view."""
        return {
            "total_requests": _counter_total(self.requests_total),
            "upstream_calls": _counter_total(self.upstream_requests_total),
            "files_written": _counter_total(self.files_written_total),
            "errors": _counter_total(self.errors_total),
        }
