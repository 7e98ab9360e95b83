"""
Signing module: SHA-256/HMAC primitives and the SigV4 signature engine.
"""

from s3relay.signing.hashing import sha256_hex, hmac_sha256
from s3relay.signing.sigv4 import (
    SignatureEngine,
    SignedRequest,
    SigningContext,
    authorization_header,
    bucket_path,
    canonical_headers,
    canonical_request,
    compute_signature,
    credential_scope,
    derive_signing_key,
    format_amz_date,
    string_to_sign,
    uri_encode,
)

__all__ = [
    "sha256_hex",
    "hmac_sha256",
    "SignatureEngine",
    "SignedRequest",
    "SigningContext",
    "authorization_header",
    "bucket_path",
    "canonical_headers",
    "canonical_request",
    "compute_signature",
    "credential_scope",
    "derive_signing_key",
    "format_amz_date",
    "string_to_sign",
    "uri_encode",
]
