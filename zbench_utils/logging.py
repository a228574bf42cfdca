# SPDX-License-Identifier: Apache-2.0
"""
Structured logging module for the zstd benchmark tools.

Event-style log lines with keyword fields, rendered as JSON (default) or
as compact ``key=value`` text. Logs go to stderr; stdout is reserved for
each tool's one-line summary.

Example:
    >>> from zbench_utils.logging import get_logger
    >>> logger = get_logger("compress")
    >>> logger.info("file_compressed", path="output/a.json", bytes_in=5000, bytes_out=1250)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Union


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs JSON-structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields from the record
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """Human-oriented single-line formatter: ``LEVEL logger message k=v ...``."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name, record.getMessage()]
        fields = getattr(record, "extra_fields", {})
        parts.extend(f"{key}={value}" for key, value in fields.items())
        line = " ".join(str(p) for p in parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _make_formatter(fmt: str) -> logging.Formatter:
    if fmt == "text":
        return TextFormatter()
    return StructuredFormatter()


class StructuredLogger:
    """
    Structured logger that outputs event-style logs.

    Attributes:
        logger: The underlying Python logger instance
        name: Logger name/identifier
    """

    def __init__(self, name: str, level: int = logging.INFO, fmt: str = "json"):
        """
        Initialize structured logger.

        Args:
            name: Logger name (e.g., "train_dict", "compress")
            level: Logging level (default: INFO)
            fmt: "json" or "text"
        """
        self.logger = logging.getLogger(name)
        self.name = name

        # Avoid adding handlers multiple times
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(_make_formatter(fmt))
            self.logger.addHandler(handler)
            self.logger.setLevel(level)
            self.logger.propagate = False

    def configure(self, level: Union[int, str], fmt: str) -> None:
        """Apply a level and output format to this logger's handlers."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setFormatter(_make_formatter(fmt))

    def _log(self, level: str, message: str, /, **kwargs: Any) -> None:
        """
        Internal method to log with extra fields.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Log message
            **kwargs: Additional fields to include in the log entry
        """
        log_method = getattr(self.logger, level.lower())

        # Create a LogRecord with extra fields
        extra = {"extra_fields": kwargs} if kwargs else {}
        log_method(message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with optional fields."""
        self._log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with optional fields."""
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with optional fields."""
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with optional fields."""
        self._log("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, extra={"extra_fields": kwargs} if kwargs else {})


# Global logger cache
_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Get or create a structured logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, level)
    return _loggers[name]


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Apply level and format to every logger created so far.

    Tools call this once after settings are loaded; loggers are created at
    import time with defaults.
    """
    for structured in _loggers.values():
        structured.configure(level, fmt)
