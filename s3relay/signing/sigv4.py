"""
AWS Signature Version 4 for S3-Compatible Services
==================================================

Signs path-style S3 requests with the ``UNSIGNED-PAYLOAD`` sentinel, so the
body is never hashed and can be streamed.

Signing Pipeline:
-----------------
1. timestamp      ``YYYYMMDDTHHMMSSZ`` (UTC, second precision)
2. date stamp     first 8 characters of the timestamp
3. canonical request
       METHOD \\n URI \\n (empty query) \\n HEADERS \\n SIGNED-HEADERS \\n UNSIGNED-PAYLOAD
4. credential scope  ``date/region/s3/aws4_request``
5. string to sign    ``AWS4-HMAC-SHA256 \\n timestamp \\n scope \\n sha256(canonical)``
6. signing key       HMAC chain over date, region, service, terminator
7. signature         hex(HMAC(signing key, string to sign))

Every step must match byte for byte or the service answers 403
SignatureDoesNotMatch. The steps are exposed as module functions so each
intermediate string can be checked literally.

Only three headers are signed (``host``, ``x-amz-content-sha256``,
``x-amz-date``); anything else sent with the request (Content-Type,
Content-Length) is outside the signature.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import quote

from s3relay.core import constants as C
from s3relay.core.config import StorageConfig
from s3relay.signing.hashing import hmac_sha256, sha256_hex

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PATH ENCODING
# =============================================================================

def uri_encode(path: str) -> str:
    """
    Percent-encode a request path per S3 rules.

    Unreserved characters (``A-Z a-z 0-9 - _ . ~``) and ``/`` are kept;
    everything else becomes ``%XX`` with uppercase hex over UTF-8 bytes.
    """
    return quote(path, safe="/")


def bucket_path(bucket: str, key: str = "") -> str:
    """Encoded path-style resource path: ``/bucket`` or ``/bucket/key``."""
    if not key:
        return "/" + uri_encode(bucket)
    return "/" + uri_encode(bucket) + "/" + uri_encode(key)


# =============================================================================
# CANONICAL FORMS
# =============================================================================

def format_amz_date(moment: datetime) -> str:
    """Format as ``YYYYMMDDTHHMMSSZ``. Naive datetimes are taken as UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(C.AMZ_DATE_FORMAT)


def canonical_headers(host: str, timestamp: str) -> str:
    """Canonical header block, lowercase names in fixed order, trailing newline."""
    return (
        f"host:{host}\n"
        f"{C.HEADER_CONTENT_SHA256}:{C.UNSIGNED_PAYLOAD}\n"
        f"{C.HEADER_AMZ_DATE}:{timestamp}\n"
    )


def canonical_request(method: str, canonical_uri: str, host: str, timestamp: str) -> str:
    """Canonical request with an empty query string and unsigned payload."""
    return "\n".join((
        method,
        canonical_uri,
        "",
        canonical_headers(host, timestamp),
        C.SIGNED_HEADERS,
        C.UNSIGNED_PAYLOAD,
    ))


def credential_scope(date_stamp: str, region: str, service: str = C.SIGV4_SERVICE) -> str:
    """``date/region/service/aws4_request``; region passes through verbatim."""
    return f"{date_stamp}/{region}/{service}/{C.SIGV4_TERMINATOR}"


def string_to_sign(timestamp: str, scope: str, canonical: str) -> str:
    return "\n".join((C.SIGV4_ALGORITHM, timestamp, scope, sha256_hex(canonical)))


def derive_signing_key(
    secret_material: bytes,
    date_stamp: str,
    region: str,
    service: str = C.SIGV4_SERVICE,
) -> bytes:
    """
    Four-stage HMAC chain producing the scoped signing key.

    Args:
        secret_material: ``b"AWS4" + secret``, already bytes.
        date_stamp: ``YYYYMMDD``.
        region: Signing region.
        service: Service name.

    Returns:
        Raw 32-byte kSigning. Each stage is keyed by the previous stage's
        raw digest, never by its hex form.
    """
    k_date = hmac_sha256(secret_material, date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, C.SIGV4_TERMINATOR)


def compute_signature(signing_key: bytes, to_sign: str) -> str:
    """Lowercase hex signature of the string to sign."""
    return hmac_sha256(signing_key, to_sign).hex()


def authorization_header(access_key_id: str, scope: str, signature: str) -> str:
    return (
        f"{C.SIGV4_ALGORITHM} Credential={access_key_id}/{scope}, "
        f"SignedHeaders={C.SIGNED_HEADERS}, Signature={signature}"
    )


# =============================================================================
# SIGNING CONTEXT
# =============================================================================

@dataclass(frozen=True, slots=True)
class SigningContext:
    """
    Per-request signing inputs.

    Built fresh for every request because the timestamp must reflect send
    time; never cached or reused.
    """

    method: str
    canonical_uri: str
    host: str
    timestamp: str
    date_stamp: str
    credential_scope: str
    signed_headers: str = C.SIGNED_HEADERS

    @classmethod
    def build(
        cls,
        config: StorageConfig,
        method: str,
        canonical_uri: str,
        moment: datetime,
    ) -> SigningContext:
        timestamp = format_amz_date(moment)
        date_stamp = timestamp[:8]
        return cls(
            method=method.upper(),
            canonical_uri=canonical_uri,
            host=config.host,
            timestamp=timestamp,
            date_stamp=date_stamp,
            credential_scope=credential_scope(date_stamp, config.region),
        )

    @property
    def canonical_request(self) -> str:
        return canonical_request(self.method, self.canonical_uri, self.host, self.timestamp)

    @property
    def string_to_sign(self) -> str:
        return string_to_sign(self.timestamp, self.credential_scope, self.canonical_request)


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """Authorization value plus the context it was computed from."""

    authorization: str
    context: SigningContext

    @property
    def timestamp(self) -> str:
        return self.context.timestamp

    @property
    def date_stamp(self) -> str:
        return self.context.date_stamp

    @property
    def host(self) -> str:
        return self.context.host

    def headers(self) -> dict[str, str]:
        """The four headers every signed request carries on the wire."""
        return {
            C.HEADER_AUTHORIZATION: self.authorization,
            C.HEADER_CONTENT_SHA256: C.UNSIGNED_PAYLOAD,
            C.HEADER_AMZ_DATE: self.context.timestamp,
            C.HEADER_HOST: self.context.host,
        }

    def __repr__(self) -> str:
        # The signature is a credential for the lifetime of the timestamp.
        return (
            f"SignedRequest(method={self.context.method!r}, "
            f"uri={self.context.canonical_uri!r}, timestamp={self.context.timestamp!r})"
        )


# =============================================================================
# SIGNATURE ENGINE
# =============================================================================

class SignatureEngine:
    """
    Shared SigV4 signer used by both the connection probe and the upload.

    Stateless apart from the clock; safe to share between concurrent
    requests since each call builds its own context.

    Example:
        >>> engine = SignatureEngine()
        >>> signed = engine.sign(config, "HEAD", bucket_path(config.bucket))
        >>> headers = signed.headers()
    """

    __slots__ = ("_clock",)

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utc_now

    def sign(
        self,
        config: StorageConfig,
        method: str,
        canonical_uri: str,
        now: Optional[datetime] = None,
    ) -> SignedRequest:
        """
        Sign one request.

        Args:
            config: Complete storage configuration.
            method: HTTP method.
            canonical_uri: Encoded request path including the bucket.
            now: Signing time; the engine clock is used when omitted.

        Returns:
            SignedRequest carrying the Authorization value and timestamp.
        """
        context = SigningContext.build(
            config, method, canonical_uri, now if now is not None else self._clock()
        )
        signing_key = derive_signing_key(
            config.secret_key_material, context.date_stamp, config.region
        )
        signature = compute_signature(signing_key, context.string_to_sign)
        return SignedRequest(
            authorization=authorization_header(
                config.access_key_id, context.credential_scope, signature
            ),
            context=context,
        )
