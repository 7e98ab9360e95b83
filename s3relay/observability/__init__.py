"""
Observability module: structured logging.
"""

from s3relay.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    redact,
    setup_logging,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "StructuredLogger",
    "redact",
    "setup_logging",
]
