"""
Exhaustive Error Hierarchy for the Signed-Upload Subsystem

Design Principles:
- Forbid exceptions for control flow (errors travel inside Result/UploadResult)
- Enforce exhaustive pattern matching for all error variants
- Never swallow errors or use null for absence
- Carry enough context for a human-readable message, never secret material

Taxonomy:
    ConfigInvalid(missing_fields)   detected before any network call
    TooLarge                        detected before any network call
    Forbidden / NotFound            bucket answered 403 / 404
    HttpStatus(code, text)          any other non-2xx answer
    Network(message)                DNS, TLS, refused connection, timeouts
    Cancelled                       caller triggered the cancel token
    Unexpected(message)             anything else escaping the transport

Usage:
    result = await probe.probe(config)
    match result:
        case Ok(reachable):
            show_connected(reachable)
        case Err(error) if error.code is ErrorCode.REMOTE_FORBIDDEN:
            show_permission_hint()
        case Err(error):
            show(error.user_message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Sequence
from uuid import uuid4


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by where the failure is detected:
    - 1xxx: Configuration errors (local, before any request)
    - 2xxx: Transfer errors (local side of the exchange)
    - 3xxx: Remote errors (the storage service answered)
    - 9xxx: Internal/unknown errors
    """

    # Configuration errors (1xxx)
    CONFIG_INVALID = 1001

    # Transfer errors (2xxx)
    TRANSFER_TOO_LARGE = 2001
    TRANSFER_NETWORK = 2002
    TRANSFER_CANCELLED = 2003

    # Remote errors (3xxx)
    REMOTE_FORBIDDEN = 3001
    REMOTE_NOT_FOUND = 3002
    REMOTE_HTTP_STATUS = 3003

    # Internal errors (9xxx)
    INTERNAL_UNEXPECTED = 9001


_KIND_NAMES: dict[ErrorCode, str] = {
    ErrorCode.CONFIG_INVALID: "ConfigInvalid",
    ErrorCode.TRANSFER_TOO_LARGE: "TooLarge",
    ErrorCode.TRANSFER_NETWORK: "Network",
    ErrorCode.TRANSFER_CANCELLED: "Cancelled",
    ErrorCode.REMOTE_FORBIDDEN: "Forbidden",
    ErrorCode.REMOTE_NOT_FOUND: "NotFound",
    ErrorCode.REMOTE_HTTP_STATUS: "HttpStatus",
    ErrorCode.INTERNAL_UNEXPECTED: "Unexpected",
}


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class RelayError(Exception):
    """
    Base class for all signed-upload errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Creation time
    - Cause chain for root cause analysis

    Instances are treated as immutable once created; `with_context`
    returns a new instance.
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cause: Optional[Exception] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        """Taxonomy name of this error (e.g. ``"Forbidden"``)."""
        return _KIND_NAMES[self.code]

    @property
    def is_cancelled(self) -> bool:
        """Cancellation is a neutral outcome, not a failure to alarm about."""
        return self.code is ErrorCode.TRANSFER_CANCELLED

    @property
    def user_message(self) -> str:
        """Human-readable message suitable for a notification or dialog."""
        return self.message

    def with_context(self, **kwargs: Any) -> RelayError:
        """
        Add context to error (returns new instance).

        Context must not contain credentials.
        """
        return type(self)(
            code=self.code,
            message=self.message,
            error_id=self.error_id,
            created_at=self.created_at,
            cause=self.cause,
            context={**self.context, **kwargs},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for logging/API responses."""
        return {
            "error_id": self.error_id,
            "kind": self.kind,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigError(RelayError, ValueError):
    """
    Incomplete or malformed storage configuration.

    Also a ValueError, so construction-time failures surface the way other
    bad arguments do.
    """

    @classmethod
    def config_invalid(cls, missing_fields: Sequence[str]) -> ConfigError:
        """Required fields are blank."""
        missing = list(missing_fields)
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Storage configuration incomplete: missing {', '.join(missing)}",
            context={"missing_fields": missing},
        )

    @classmethod
    def malformed(cls, field_name: str, reason: str) -> ConfigError:
        """A field is present but unusable."""
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Storage configuration invalid: {field_name} {reason}",
            context={"field": field_name, "reason": reason},
        )

    @property
    def missing_fields(self) -> list[str]:
        return list(self.context.get("missing_fields", []))


# =============================================================================
# TRANSFER ERRORS (LOCAL SIDE)
# =============================================================================
@dataclass
class TransferError(RelayError):
    """
    Failures on the caller's side of the exchange.

    Covers the size gate, connectivity problems and cancellation.
    """

    @classmethod
    def too_large(cls, size_bytes: int, limit_bytes: int) -> TransferError:
        """File exceeds the single-request upload limit."""
        return cls(
            code=ErrorCode.TRANSFER_TOO_LARGE,
            message=(
                f"File is {size_bytes} bytes; uploads are limited to "
                f"{limit_bytes // (1024 * 1024)} MiB"
            ),
            context={"size_bytes": size_bytes, "limit_bytes": limit_bytes},
        )

    @classmethod
    def network(cls, message: str, cause: Optional[Exception] = None) -> TransferError:
        """DNS, TLS, refused connection or timeout."""
        return cls(
            code=ErrorCode.TRANSFER_NETWORK,
            message=f"Network error: {message}",
            cause=cause,
            context={"detail": message},
        )

    @classmethod
    def cancelled(cls) -> TransferError:
        """Caller cancelled the transfer."""
        return cls(
            code=ErrorCode.TRANSFER_CANCELLED,
            message="Upload cancelled",
        )

    @classmethod
    def unexpected(cls, message: str, cause: Optional[Exception] = None) -> TransferError:
        """Failure that fits no other category."""
        return cls(
            code=ErrorCode.INTERNAL_UNEXPECTED,
            message=f"Unexpected error: {message}",
            cause=cause,
            context={"detail": message},
        )


# =============================================================================
# REMOTE ERRORS (STORAGE SERVICE ANSWERED)
# =============================================================================
@dataclass
class RemoteError(RelayError):
    """Non-success answers from the storage service."""

    @classmethod
    def forbidden(cls, bucket: str) -> RemoteError:
        """Credentials rejected or bucket policy denies access."""
        return cls(
            code=ErrorCode.REMOTE_FORBIDDEN,
            message=(
                f"Access to bucket '{bucket}' denied: check the access key "
                "permissions or the bucket policy"
            ),
            context={"bucket": bucket, "status_code": 403},
        )

    @classmethod
    def not_found(cls, bucket: str) -> RemoteError:
        """Bucket does not exist at this endpoint/region."""
        return cls(
            code=ErrorCode.REMOTE_NOT_FOUND,
            message=(
                f"Bucket '{bucket}' not found: check the bucket name and "
                "region settings"
            ),
            context={"bucket": bucket, "status_code": 404},
        )

    @classmethod
    def http_status(cls, status_code: int, status_text: str) -> RemoteError:
        """Any other non-2xx status."""
        return cls(
            code=ErrorCode.REMOTE_HTTP_STATUS,
            message=f"HTTP {status_code} {status_text}".rstrip(),
            context={"status_code": status_code, "status_text": status_text},
        )

    @property
    def status_code(self) -> Optional[int]:
        return self.context.get("status_code")
