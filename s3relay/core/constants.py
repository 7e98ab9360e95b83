"""
System-Wide Constants for the Signed-Upload Subsystem

All magic numbers, wire literals and provider defaults centralized here.

The SigV4 literals below are part of the wire format: changing any of them
breaks interoperability with S3-compatible services.
"""

from typing import Final

# =============================================================================
# SIZE AND TIME UNITS
# =============================================================================
KB: Final[int] = 1024
MB: Final[int] = 1024 * KB
GB: Final[int] = 1024 * MB

NS_PER_MS: Final[int] = 1_000_000
NS_PER_S: Final[int] = 1_000_000_000

# =============================================================================
# UPLOAD LIMITS
# =============================================================================
# Single-request PUT only; larger files would need multipart upload.
MAX_UPLOAD_BYTES: Final[int] = 500 * MB
DEFAULT_CHUNK_BYTES: Final[int] = 64 * KB
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

# =============================================================================
# SIGV4
# =============================================================================
SIGV4_ALGORITHM: Final[str] = "AWS4-HMAC-SHA256"
SIGV4_SERVICE: Final[str] = "s3"
SIGV4_TERMINATOR: Final[str] = "aws4_request"
SIGV4_KEY_PREFIX: Final[str] = "AWS4"
UNSIGNED_PAYLOAD: Final[str] = "UNSIGNED-PAYLOAD"
AMZ_DATE_FORMAT: Final[str] = "%Y%m%dT%H%M%SZ"
SIGNED_HEADERS: Final[str] = "host;x-amz-content-sha256;x-amz-date"

HEADER_AUTHORIZATION: Final[str] = "Authorization"
HEADER_CONTENT_SHA256: Final[str] = "x-amz-content-sha256"
HEADER_AMZ_DATE: Final[str] = "x-amz-date"
HEADER_HOST: Final[str] = "Host"
HEADER_CONTENT_TYPE: Final[str] = "Content-Type"
HEADER_CONTENT_LENGTH: Final[str] = "Content-Length"

# =============================================================================
# OBJECT KEYS
# =============================================================================
OBJECT_KEY_TOKEN_LENGTH: Final[int] = 8
OBJECT_KEY_ALPHABET: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"

# =============================================================================
# PROVIDER DEFAULTS
# =============================================================================
AWS_DEFAULT_ENDPOINT: Final[str] = "https://s3.amazonaws.com"
AWS_DEFAULT_REGION: Final[str] = "us-east-1"
R2_REGION: Final[str] = "auto"

# =============================================================================
# ENVIRONMENT
# =============================================================================
ENV_PREFIX: Final[str] = "S3RELAY"
