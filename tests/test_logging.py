# ABOUTME: Test cases for structured logging infrastructure with request ID tracking
# ABOUTME: Validates JSON output, level filtering, request ID binding, and request metrics lines

import json
import logging
import tempfile
from pathlib import Path

import pytest
import structlog

from podcast_api.logging_config import configure_logging, log_request_metrics, request_id_context


def _flush_handlers():
    for handler in logging.getLogger().handlers:
        handler.flush()


def _read_entries(path):
    content = Path(path).read_text()
    return [json.loads(line) for line in content.strip().split("\n") if line]


class TestLoggingConfiguration:
    """Test logging system configuration and functionality."""

    @pytest.fixture
    def log_file(self):
        with tempfile.NamedTemporaryFile(mode="w+", suffix=".log", delete=False) as f:
            path = f.name
        yield path
        # Back to stdout so later tests do not write into a stale file
        configure_logging()
        Path(path).unlink(missing_ok=True)

    def test_configure_logging_with_defaults(self):
        configure_logging()

        logger = structlog.get_logger("test")
        logger.info("test message", key="value")

        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_with_custom_level(self):
        configure_logging(log_level="debug")

        assert logging.getLogger().level == logging.DEBUG
        configure_logging()

    def test_json_output_format(self, log_file):
        configure_logging(log_file=log_file)

        logger = structlog.get_logger("test")
        logger.info("test message", key="value", number=42)
        _flush_handlers()

        entry = _read_entries(log_file)[-1]
        assert entry["event"] == "test message"
        assert entry["key"] == "value"
        assert entry["number"] == 42
        assert entry["level"] == "info"
        assert entry["logger"] == "test"
        assert "timestamp" in entry

    def test_request_metrics_line(self, log_file):
        configure_logging(log_file=log_file)

        log_request_metrics(
            method="POST",
            path="/api/generate-from-transcript",
            status_code=200,
            duration_ms=1500.5,
            request_id="test-123",
            additional_data={"client_ip": "127.0.0.1"},
        )
        _flush_handlers()

        entry = _read_entries(log_file)[-1]
        assert entry["event"] == "request_completed"
        assert entry["logger"] == "podcast_api.metrics"
        assert entry["method"] == "POST"
        assert entry["path"] == "/api/generate-from-transcript"
        assert entry["status_code"] == 200
        assert entry["duration_ms"] == 1500.5
        assert entry["request_id"] == "test-123"
        assert entry["client_ip"] == "127.0.0.1"

    def test_error_logging_with_exception(self, log_file):
        configure_logging(log_file=log_file)

        logger = structlog.get_logger("test")
        try:
            raise ValueError("Test exception")
        except ValueError as e:
            logger.error("Test error occurred", exc_info=e)
        _flush_handlers()

        entry = _read_entries(log_file)[-1]
        assert entry["event"] == "Test error occurred"
        assert entry["level"] == "error"
        assert "Test exception" in entry["exception"]

    def test_log_level_filtering(self, log_file):
        configure_logging(log_level="warning", log_file=log_file)

        logger = structlog.get_logger("test")
        logger.debug("debug message")
        logger.info("info message")
        logger.warning("warning message")
        logger.error("error message")
        _flush_handlers()

        entries = _read_entries(log_file)
        assert [e["event"] for e in entries] == ["warning message", "error message"]

    def test_console_renderer(self, log_file):
        configure_logging(log_file=log_file, enable_json=False)

        structlog.get_logger("test").info("plain message")
        _flush_handlers()

        assert "plain message" in Path(log_file).read_text()


class TestRequestIdContext:

    @pytest.fixture
    def log_file(self):
        with tempfile.NamedTemporaryFile(mode="w+", suffix=".log", delete=False) as f:
            path = f.name
        configure_logging(log_file=path)
        yield path
        configure_logging()
        Path(path).unlink(missing_ok=True)

    def test_context_preservation(self, log_file):
        with request_id_context("context-test-123"):
            logger = structlog.get_logger("test")
            logger.info("first message")
            logger.info("second message", extra_key="extra_value")
        _flush_handlers()

        entries = _read_entries(log_file)
        assert len(entries) == 2
        assert all(e["request_id"] == "context-test-123" for e in entries)

    def test_nested_contexts_restore_outer_id(self, log_file):
        logger = structlog.get_logger("test")

        with request_id_context("outer-123"):
            logger.info("outer message")
            with request_id_context("inner-456"):
                logger.info("inner message")
            logger.info("outer again")
        logger.info("after context")
        _flush_handlers()

        entries = {e["event"]: e for e in _read_entries(log_file)}
        assert entries["outer message"]["request_id"] == "outer-123"
        assert entries["inner message"]["request_id"] == "inner-456"
        assert entries["outer again"]["request_id"] == "outer-123"
        assert "request_id" not in entries["after context"]

    def test_context_is_cleared_after_exception(self, log_file):
        with pytest.raises(RuntimeError):
            with request_id_context("failing-request"):
                raise RuntimeError("boom")

        assert "request_id" not in structlog.contextvars.get_contextvars()
