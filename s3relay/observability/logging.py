"""
Structured Logging: JSON-Formatted with Request-Scoped Fields

Provides:
- JSON-formatted log output
- Context propagation (bucket, object key, operation)
- Log level filtering
- Redaction of credential-bearing fields

Secret keys and Authorization values must never reach a log line; any
extra field with a sensitive name is replaced before formatting.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Optional, TextIO


class LogLevel(IntEnum):
    """Log level enumeration."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


# Context variable for request-scoped fields
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

_SENSITIVE_FIELDS = frozenset({
    "authorization",
    "secret_access_key",
    "secretaccesskey",
    "secret",
    "signing_key",
})

_STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename",
    "funcName", "levelname", "levelno", "lineno",
    "module", "msecs", "pathname", "process",
    "processName", "relativeCreated", "stack_info",
    "exc_info", "exc_text", "thread", "threadName",
    "taskName",
})

REDACTED = "[REDACTED]"


def redact(fields: dict[str, Any]) -> dict[str, Any]:
    """Copy of `fields` with credential-bearing values replaced."""
    return {
        key: (REDACTED if key.lower() in _SENSITIVE_FIELDS else value)
        for key, value in fields.items()
    }


@dataclass
class LogRecord:
    """Structured log record."""
    timestamp: str
    level: str
    message: str
    logger_name: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize to JSON."""
        data = {
            "@timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "logger": self.logger_name,
        }
        data.update(self.extra)
        return json.dumps(data, default=str)


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter with context fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        extra = dict(_log_context.get())

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                extra[key] = value

        if record.exc_info:
            extra["exception"] = self.formatException(record.exc_info)

        log_record = LogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=record.levelname,
            message=record.getMessage(),
            logger_name=record.name,
            extra=redact(extra),
        )

        return log_record.to_json()


class StructuredLogger:
    """
    Structured logger with context propagation.

    Usage:
        logger = StructuredLogger("s3relay.cli")

        with logger.context(bucket="media"):
            logger.info("Uploading")
    """

    __slots__ = ("_logger", "_default_extra")

    def __init__(
        self,
        name: str,
        level: Optional[LogLevel] = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(level.value)
        self._default_extra: dict[str, Any] = {}

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.ERROR, message, **kwargs)

    def _log(self, level: LogLevel, message: str, **kwargs: Any) -> None:
        extra = redact({**self._default_extra, **kwargs})
        self._logger.log(level.value, message, extra=extra)

    def with_extra(self, **kwargs: Any) -> StructuredLogger:
        """Create child logger with additional default fields."""
        new_logger = StructuredLogger(self._logger.name)
        new_logger._default_extra = {**self._default_extra, **kwargs}
        return new_logger

    @staticmethod
    def context(**kwargs: Any) -> _LogContext:
        """Context manager for request-scoped fields."""
        return _LogContext(kwargs)


class _LogContext:
    """Context manager for adding fields to all logs."""

    __slots__ = ("_fields", "_token")

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields
        self._token = None

    def __enter__(self) -> _LogContext:
        new_context = {**_log_context.get(), **self._fields}
        self._token = _log_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token:
            _log_context.reset(self._token)


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure root logger for structured logging.

    Args:
        level: Minimum log level
        json_output: Use JSON formatting
        stream: Output stream (default: stderr)
    """
    root = logging.getLogger()
    root.setLevel(level.value)

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level.value)

    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        ))

    root.addHandler(handler)

    # httpx logs full request lines at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
