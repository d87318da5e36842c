"""
Structured logging utility for the comparator.

Provides JSON-formatted logging with correlation context injection,
content previews and operation timing. Correlation fields are held in a
context variable so records emitted from worker threads carry the fields of
the batch that submitted them.
"""

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Iterator, Optional

_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "process_comparator_log_context", default={}
)


def preview_content(content: Optional[str], limit: int = 64) -> str:
    """
    Shorten content for log output.

    Args:
        content: Text to preview (may be None)
        limit: Maximum number of characters kept

    Returns:
        Preview string

    Example:
        >>> preview_content("abcdef", limit=3)
        'abc...(6 chars)'
        >>> preview_content(None)
        '<none>'
    """
    if content is None:
        return "<none>"

    if len(content) <= limit:
        return content

    return f"{content[:limit]}...({len(content)} chars)"


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the correlation fields bound to the current context."""
    return dict(_log_context.get())


@contextmanager
def bind_log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """
    Bind correlation fields for the duration of a block.

    Fields are merged over any fields already bound. Tasks started with
    contextvars.copy_context() inside the block inherit them.

    Usage:
        with bind_log_context(batch_id="b-1"):
            orchestrator.compare(units)
    """
    merged = {**_log_context.get(), **fields}
    token = _log_context.set(merged)
    try:
        yield merged
    finally:
        _log_context.reset(token)


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.

    All log output is a single JSON object per record.
    """

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
        """
        self.logger = logging.getLogger(name)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "compare_batch", "simple_compare")
            context: Context dict with unit_id, content_type, etc.
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        merged_context = {**_log_context.get(), **(context or {})}
        if merged_context:
            log_entry["context"] = merged_context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_log("DEBUG", message, operation, context))

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        log_json = self._format_log("INFO", message, operation, context, duration_ms)
        self.logger.info(log_json)

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        log_json = self._format_log("WARNING", message, operation, context, error=error)
        self.logger.warning(log_json)

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        log_json = self._format_log(
            "ERROR", message, operation, context, duration_ms, error
        )
        self.logger.error(log_json)


def log_operation(operation_name: str):
    """
    Decorator to automatically log operation start, duration, and completion.

    Usage:
        @log_operation("compare_batch")
        def compare(self, units):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = {"function": func.__name__}

            logger.debug(
                f"Starting {operation_name}", operation=operation_name, context=context
            )

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.info(
                    f"Completed {operation_name}",
                    operation=operation_name,
                    context=context,
                    duration_ms=duration_ms,
                )
                return result
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=duration_ms,
                )
                raise

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
