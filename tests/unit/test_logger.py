"""
Unit tests for structured logging utility (process_comparator/utils/logger.py)

Tests covering:
- JSON log formatting with required fields (timestamp, level, message, operation, context)
- Content previews
- Correlation context binding and nesting
- Log operation decorator
"""

import json
import logging
from datetime import datetime
from io import StringIO

import pytest

from process_comparator.utils.logger import (
    StructuredLogger,
    bind_log_context,
    get_log_context,
    get_logger,
    log_operation,
    preview_content,
)


@pytest.fixture
def logger_with_handler():
    """Fixture providing logger with string stream handler."""
    logger = StructuredLogger("test_logger")
    logger.logger.handlers.clear()

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)

    yield logger, stream

    logger.logger.handlers.clear()


class TestPreviewContent:
    """Tests for content preview utility."""

    def test_short_content_unchanged(self):
        """Test content within the limit is returned as is."""
        assert preview_content("abc") == "abc"

    def test_long_content_truncated(self):
        """Test long content is cut and annotated with its length."""
        assert preview_content("abcdef", limit=3) == "abc...(6 chars)"

    def test_none_content(self):
        """Test absent content has a placeholder."""
        assert preview_content(None) == "<none>"


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def test_format_log_basic_fields(self, logger_with_handler):
        """Test log formatting includes required fields."""
        logger, _ = logger_with_handler

        parsed = json.loads(logger._format_log("INFO", "Test message"))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert "operation" not in parsed
        assert "context" not in parsed

    def test_format_log_timestamp_format(self, logger_with_handler):
        """Test timestamp is in ISO format with Z suffix."""
        logger, _ = logger_with_handler

        timestamp = json.loads(logger._format_log("INFO", "Test"))["timestamp"]

        assert timestamp.endswith("Z")
        datetime.fromisoformat(timestamp.replace("Z", "+00:00"))

    def test_format_log_all_fields(self, logger_with_handler):
        """Test log formatting with all optional fields."""
        logger, _ = logger_with_handler

        parsed = json.loads(
            logger._format_log(
                "ERROR",
                "Comparison failed",
                operation="run_task",
                context={"unit_id": "u-1"},
                duration_ms=45.678,
                error="RuntimeError: boom",
            )
        )

        assert parsed["operation"] == "run_task"
        assert parsed["context"] == {"unit_id": "u-1"}
        assert parsed["duration_ms"] == 45.68
        assert parsed["error"] == "RuntimeError: boom"

    def test_bound_context_is_merged(self, logger_with_handler):
        """Test bound correlation fields appear in every record."""
        logger, _ = logger_with_handler

        with bind_log_context(batch_id="b-1"):
            parsed = json.loads(logger._format_log("INFO", "x", context={"unit_id": "u-1"}))

        assert parsed["context"] == {"batch_id": "b-1", "unit_id": "u-1"}

    def test_explicit_context_wins(self, logger_with_handler):
        """Test explicit context overrides bound fields with the same key."""
        logger, _ = logger_with_handler

        with bind_log_context(unit_id="outer"):
            parsed = json.loads(logger._format_log("INFO", "x", context={"unit_id": "inner"}))

        assert parsed["context"]["unit_id"] == "inner"

    def test_logger_methods_emit_json(self, logger_with_handler):
        """Test every level emits one JSON line."""
        logger, stream = logger_with_handler

        logger.debug("d", operation="op")
        logger.info("i", duration_ms=1.5)
        logger.warning("w", error="careful")
        logger.error("e", error="bad")

        lines = [json.loads(line) for line in stream.getvalue().strip().split("\n")]
        assert [line["level"] for line in lines] == ["DEBUG", "INFO", "WARNING", "ERROR"]
        assert lines[1]["duration_ms"] == 1.5
        assert lines[3]["error"] == "bad"

    def test_debug_skipped_when_disabled(self, logger_with_handler):
        """Test debug records are not built above DEBUG level."""
        logger, stream = logger_with_handler
        logger.logger.setLevel(logging.INFO)

        logger.debug("hidden")

        assert stream.getvalue() == ""


class TestBindLogContext:
    """Tests for correlation context binding."""

    def test_nesting_and_reset(self):
        """Test nested bindings merge and are undone on exit."""
        assert get_log_context() == {}

        with bind_log_context(batch_id="b"):
            with bind_log_context(unit_id="u"):
                assert get_log_context() == {"batch_id": "b", "unit_id": "u"}
            assert get_log_context() == {"batch_id": "b"}

        assert get_log_context() == {}

    def test_reset_after_exception(self):
        """Test the context is restored when the block raises."""
        with pytest.raises(RuntimeError):
            with bind_log_context(unit_id="u"):
                raise RuntimeError("boom")

        assert get_log_context() == {}


class TestLogOperationDecorator:
    """Tests for log_operation decorator."""

    def test_success_logged_with_duration(self, caplog):
        """Test decorator logs completion with a duration."""

        @log_operation("test_operation")
        def work():
            return "result"

        with caplog.at_level(logging.DEBUG):
            assert work() == "result"

        records = [json.loads(r.getMessage()) for r in caplog.records]
        completed = [r for r in records if r["message"] == "Completed test_operation"]
        assert len(completed) == 1
        assert completed[0]["context"]["function"] == "work"
        assert "duration_ms" in completed[0]

    def test_failure_logged_and_reraised(self, caplog):
        """Test decorator logs the failure and re-raises."""

        @log_operation("failing_operation")
        def failing():
            raise ValueError("Test error")

        with caplog.at_level(logging.INFO):
            with pytest.raises(ValueError):
                failing()

        records = [json.loads(r.getMessage()) for r in caplog.records]
        assert any(r["error"] == "Test error" for r in records if r["level"] == "ERROR")

    def test_preserves_function_metadata(self):
        """Test decorator preserves function name and docstring."""

        @log_operation("test_op")
        def my_function():
            """Test function docstring."""

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "Test function docstring."


class TestGetLoggerFactory:
    """Tests for get_logger factory function."""

    def test_get_logger_returns_structured_logger(self):
        """Test get_logger returns a StructuredLogger bound to the name."""
        logger = get_logger("module.submodule")

        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "module.submodule"
