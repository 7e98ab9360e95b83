"""
s3relay: Signed Uploads to S3-Compatible Object Storage

Proves possession of an S3 credential with AWS Signature Version 4, with no
server-side component:
- ConnectionProbe: signed HEAD against the bucket (free to call)
- UploadTransport: signed PUT streaming a file, with progress and cancellation
- ObjectKeyGenerator: date-partitioned object keys
- validate_config: completeness check before any network call

Works with AWS S3, Cloudflare R2, MinIO and other path-style S3 services.

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from s3relay.core.types import (
    Result,
    Ok,
    Err,
    ProgressEvent,
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
    validate_config,
    check_config,
    is_available,
)
from s3relay.signing import SignatureEngine, SignedRequest, SigningContext
from s3relay.transfer import (
    CancelToken,
    ConnectionProbe,
    ObjectKeyGenerator,
    TransferMetrics,
    UploadTransport,
    describe_attachment,
)

__all__ = [
    # Version
    "__version__",
    # Core types
    "Result",
    "Ok",
    "Err",
    "ProgressEvent",
    "Reachable",
    "UploadResult",
    # Errors
    "ErrorCode",
    "RelayError",
    "ConfigError",
    "TransferError",
    "RemoteError",
    # Configuration
    "Provider",
    "StorageConfig",
    "validate_config",
    "check_config",
    "is_available",
    # Signing
    "SignatureEngine",
    "SignedRequest",
    "SigningContext",
    # Transfer
    "CancelToken",
    "ConnectionProbe",
    "ObjectKeyGenerator",
    "TransferMetrics",
    "UploadTransport",
    "describe_attachment",
]
