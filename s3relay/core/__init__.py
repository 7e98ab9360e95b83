"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for signed uploads:
- Result/Either monads for zero-exception control flow
- Exhaustive error hierarchy with pattern matching support
- Storage configuration with completeness validation
"""

from s3relay.core.types import (
    Result,
    Ok,
    Err,
    ProgressEvent,
    ProgressCallback,
    Reachable,
    UploadResult,
)
from s3relay.core.errors import (
    ErrorCode,
    RelayError,
    ConfigError,
    TransferError,
    RemoteError,
)
from s3relay.core.config import (
    Provider,
    StorageConfig,
    PROVIDER_DEFAULTS,
    REQUIRED_FIELDS,
    validate_config,
    check_config,
    is_available,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ProgressEvent",
    "ProgressCallback",
    "Reachable",
    "UploadResult",
    "ErrorCode",
    "RelayError",
    "ConfigError",
    "TransferError",
    "RemoteError",
    "Provider",
    "StorageConfig",
    "PROVIDER_DEFAULTS",
    "REQUIRED_FIELDS",
    "validate_config",
    "check_config",
    "is_available",
]
