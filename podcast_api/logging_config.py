# ABOUTME: structlog setup for the podcast generator: JSON lines on stdout or a file
# ABOUTME: Also binds per-request IDs into the log context and emits per-request timing lines

import logging
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog

# Third-party loggers that log every outbound call at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

METRICS_LOGGER = "podcast_api.metrics"


def _processor_chain(enable_json: bool) -> List[Any]:
    renderer = structlog.processors.JSONRenderer() if enable_json else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _output_handler(log_file: Optional[str], level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    return handler


def configure_logging(
    log_level: str = "info",
    log_file: Optional[str] = None,
    enable_json: bool = True
) -> None:
    """
    Route all structlog output through a single root handler.

    Safe to call repeatedly; every call replaces the previous setup.

    Args:
        log_level: debug, info, warning, error or critical
        log_file: Write to this file instead of stdout
        enable_json: One JSON object per line; console rendering otherwise
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.reset_defaults()
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(_output_handler(log_file, level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=_processor_chain(enable_json),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def request_id_context(request_id: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with ``request_id``.

    Leaving the block restores whatever was bound before, so nesting works.
    """
    tokens = structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def log_request_metrics(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    request_id: str,
    additional_data: Optional[Dict[str, Any]] = None
) -> None:
    """Emit one ``request_completed`` line for a finished HTTP request."""
    fields: Dict[str, Any] = dict(additional_data or {})
    fields.update(
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
        request_id=request_id,
    )
    structlog.get_logger(METRICS_LOGGER).info("request_completed", **fields)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
