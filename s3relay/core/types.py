"""
Core Type Definitions for the Signed-Upload Subsystem

Implements Result/Either monads for zero-exception control flow, plus the
terminal and intermediate values produced by probes and uploads.

Design Principles:
- Never use null for absence (use Optional or Result)
- Terminal values are frozen: produced once, never mutated
- Errors travel as values; exceptions are reserved for programming errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Literal,
    Optional,
    TypeVar,
    Union,
)

if TYPE_CHECKING:
    from s3relay.core.errors import RelayError

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD: ZERO-EXCEPTION CONTROL FLOW
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result monad.

    Immutable, hashable container for successful computation results.
    """

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return value, ignoring default."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def flat_map(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Monadic bind for chaining fallible operations."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result monad.

    Immutable container for error information.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Attempting to unwrap an error is a programming error.

        Raises:
            RuntimeError: Always, with error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value on error."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op on error variant - propagates error unchanged."""
        return self

    def flat_map(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        """Propagate error through monadic chain."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# TRANSFER VALUES
# =============================================================================
@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """
    Byte-level progress of a single upload.

    For one upload, `bytes_sent` strictly increases from event to event and
    never exceeds `bytes_total`.
    """

    bytes_sent: int
    bytes_total: int

    @property
    def fraction(self) -> float:
        if self.bytes_total <= 0:
            return 1.0
        return self.bytes_sent / self.bytes_total

    @property
    def percent(self) -> int:
        """Whole-number percentage, as shown to users."""
        return round(self.fraction * 100)


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True, slots=True)
class Reachable:
    """Successful bucket probe."""

    status_code: int
    latency_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class UploadResult:
    """
    Terminal value of one upload attempt.

    Exactly one is produced per call to `UploadTransport.upload`. On success
    `access_url` is the address the object can be fetched from; on failure
    `error` carries the taxonomy kind and a human-readable message.

    Attributes:
        success: True iff the object was stored.
        access_url: Public or endpoint URL of the stored object.
        original_file_name: File name as supplied by the caller.
        mime_type: Content type the object was stored with.
        object_key: Key under the bucket (path prefix included).
        error: Failure reason when success is False.
    """

    success: bool
    access_url: Optional[str] = None
    original_file_name: Optional[str] = None
    mime_type: Optional[str] = None
    object_key: Optional[str] = None
    error: Optional[RelayError] = None

    @classmethod
    def ok(
        cls,
        access_url: str,
        original_file_name: str,
        mime_type: str,
        object_key: str,
    ) -> UploadResult:
        return cls(
            success=True,
            access_url=access_url,
            original_file_name=original_file_name,
            mime_type=mime_type,
            object_key=object_key,
        )

    @classmethod
    def failed(cls, error: RelayError) -> UploadResult:
        return cls(success=False, error=error)

    @property
    def cancelled(self) -> bool:
        return self.error is not None and self.error.is_cancelled

    def to_result(self) -> Result[UploadResult, RelayError]:
        """View this upload as a Result for monadic chaining."""
        if self.success:
            return Ok(self)
        return Err(self.error)
