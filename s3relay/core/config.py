"""
Storage Configuration for the Signed-Upload Subsystem

Type-safe, immutable configuration for an S3-compatible bucket.

Design:
- Immutable after construction (frozen dataclass); the core never mutates
  or persists it
- Fail-fast on malformed values in __post_init__
- Completeness is checked separately by validate_config(), since a
  half-filled config is a normal state for a settings form
- Supports environment variable and persisted-settings loading
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import httpx

from s3relay.core import constants as C
from s3relay.core.errors import ConfigError
from s3relay.core.types import Err, Ok, Result


class Provider(Enum):
    """S3-compatible storage provider."""

    AWS = "aws"
    R2 = "r2"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Optional[str]) -> Provider:
        """Parse a provider name; blank means CUSTOM."""
        if not value or not value.strip():
            return cls.CUSTOM
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown storage provider: {value!r}") from None


# Endpoint/region defaults applied when a provider is selected. R2 endpoints
# are account-specific, so only the region is filled in.
PROVIDER_DEFAULTS: dict[Provider, dict[str, str]] = {
    Provider.AWS: {"endpoint": C.AWS_DEFAULT_ENDPOINT, "region": C.AWS_DEFAULT_REGION},
    Provider.R2: {"endpoint": "", "region": C.R2_REGION},
    Provider.CUSTOM: {"endpoint": "", "region": ""},
}

# Order matters: validate_config reports missing fields in this order.
REQUIRED_FIELDS: tuple[str, ...] = (
    "endpoint",
    "region",
    "bucket",
    "access_key_id",
    "secret_access_key",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Persisted settings use camelCase keys.
_MAPPING_KEYS: dict[str, tuple[str, ...]] = {
    "provider": ("provider",),
    "endpoint": ("endpoint",),
    "region": ("region",),
    "bucket": ("bucket",),
    "access_key_id": ("accessKeyId", "access_key_id"),
    "secret_access_key": ("secretAccessKey", "secret_access_key"),
    "custom_domain": ("customDomain", "custom_domain"),
    "path_prefix": ("pathPrefix", "path_prefix"),
}


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """
    S3-compatible bucket configuration.

    Supports AWS S3, Cloudflare R2, MinIO and other S3-compatible stores
    addressed path-style (``{endpoint}/{bucket}/{key}``).

    Attributes:
        provider: Provider preset the values came from.
        endpoint: Absolute http(s) URL of the service.
        region: Signing region, passed through verbatim ('auto' for R2).
        bucket: Bucket name.
        access_key_id: Access key ID, part of the credential scope.
        secret_access_key: Secret key; never logged or shown in repr.
        custom_domain: Public base URL used to build access URLs.
        path_prefix: Prepended verbatim to generated object keys.
    """

    provider: Provider = Provider.CUSTOM
    endpoint: str = ""
    region: str = ""
    bucket: str = ""
    access_key_id: str = ""
    secret_access_key: str = field(default="", repr=False)
    custom_domain: Optional[str] = None
    path_prefix: Optional[str] = None

    def __post_init__(self) -> None:
        """
        Validate the endpoint when one is given.

        Raises:
            ConfigError: If endpoint is not an absolute http(s) URL that the
                HTTP client accepts (ConfigError is also a ValueError).
        """
        endpoint = self.endpoint.strip()
        if not endpoint:
            return
        try:
            url = httpx.URL(endpoint)
            # Accessing .port validates it (raises ValueError when out of range)
            urlsplit(endpoint).port
        except (httpx.InvalidURL, ValueError) as e:
            raise ConfigError.malformed("endpoint", f"is not a valid URL: {e}") from e
        if url.scheme not in _DEFAULT_PORTS or not url.host:
            raise ConfigError.malformed(
                "endpoint", f"must be an absolute http(s) URL, got {self.endpoint!r}"
            )

    # -------------------------------------------------------------------------
    # DERIVED VALUES
    # -------------------------------------------------------------------------

    @property
    def host(self) -> str:
        """Endpoint authority as sent in the Host header (default port omitted)."""
        parts = urlsplit(self.endpoint.strip())
        hostname = parts.hostname or ""
        if ":" in hostname:
            hostname = f"[{hostname}]"
        port = parts.port
        if port is not None and port != _DEFAULT_PORTS.get(parts.scheme):
            return f"{hostname}:{port}"
        return hostname

    @property
    def base_url(self) -> str:
        """Endpoint with exactly one trailing slash."""
        return self.endpoint.strip().rstrip("/") + "/"

    @property
    def prefix(self) -> str:
        """Path prefix, empty when unset."""
        return self.path_prefix or ""

    @property
    def secret_key_material(self) -> bytes:
        """Initial SigV4 key bytes: ``b"AWS4" + secret``."""
        return (C.SIGV4_KEY_PREFIX + self.secret_access_key).encode("utf-8")

    # -------------------------------------------------------------------------
    # CONSTRUCTORS
    # -------------------------------------------------------------------------

    @classmethod
    def for_provider(cls, provider: Provider, **fields: Any) -> StorageConfig:
        """
        Build a config pre-filled with the provider's endpoint/region.

        Explicitly passed fields take precedence over the defaults.
        """
        values: dict[str, Any] = dict(PROVIDER_DEFAULTS[provider])
        values.update(fields)
        return cls(provider=provider, **values)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StorageConfig:
        """
        Construct from persisted settings.

        Accepts the camelCase keys used by the settings store as well as
        snake_case field names. Missing keys become blank values.
        """
        values: dict[str, Any] = {}
        for name, keys in _MAPPING_KEYS.items():
            for key in keys:
                if data.get(key) is not None:
                    values[name] = data[key]
                    break
        provider = Provider.parse(values.pop("provider", None))
        fields_: dict[str, Any] = {k: str(v) for k, v in values.items()}
        for name in ("custom_domain", "path_prefix"):
            if name in fields_ and not fields_[name].strip():
                fields_[name] = None
        return cls(provider=provider, **fields_)

    @classmethod
    def from_env(cls, prefix: str = C.ENV_PREFIX) -> StorageConfig:
        """
        Construct configuration from environment variables.

        Environment Variables:
        - {prefix}_PROVIDER: aws, r2 or custom (default: custom)
        - {prefix}_ENDPOINT: Service URL (provider default when unset)
        - {prefix}_REGION: Signing region (provider default when unset)
        - {prefix}_BUCKET: Bucket name
        - {prefix}_ACCESS_KEY_ID: Access key ID
        - {prefix}_SECRET_ACCESS_KEY: Secret access key
        - {prefix}_CUSTOM_DOMAIN: Public base URL for access links
        - {prefix}_PATH_PREFIX: Object key prefix

        Completeness is not enforced here; call validate_config().
        """
        def _get(key: str, default: str = "") -> str:
            return os.environ.get(f"{prefix}_{key}", default).strip()

        provider = Provider.parse(_get("PROVIDER"))
        defaults = PROVIDER_DEFAULTS[provider]

        return cls(
            provider=provider,
            endpoint=_get("ENDPOINT") or defaults["endpoint"],
            region=_get("REGION") or defaults["region"],
            bucket=_get("BUCKET"),
            access_key_id=_get("ACCESS_KEY_ID"),
            secret_access_key=_get("SECRET_ACCESS_KEY"),
            custom_domain=_get("CUSTOM_DOMAIN") or None,
            path_prefix=_get("PATH_PREFIX") or None,
        )

    def with_changes(self, **changes: Any) -> StorageConfig:
        """Return a copy with fields replaced (the original is untouched)."""
        return replace(self, **changes)

    def to_mapping(self, include_secret: bool = False) -> dict[str, Any]:
        """
        Serialize to the persisted-settings shape.

        The secret is omitted unless explicitly requested.
        """
        data: dict[str, Any] = {
            "provider": self.provider.value,
            "endpoint": self.endpoint,
            "region": self.region,
            "bucket": self.bucket,
            "accessKeyId": self.access_key_id,
            "customDomain": self.custom_domain,
            "pathPrefix": self.path_prefix,
        }
        if include_secret:
            data["secretAccessKey"] = self.secret_access_key
        return data


# =============================================================================
# VALIDATION
# =============================================================================

def validate_config(config: StorageConfig) -> list[str]:
    """
    Return the required fields that are blank, in fixed order.

    An empty list means the config can be used for signed requests.
    Pure; performs no I/O.
    """
    return [
        name for name in REQUIRED_FIELDS
        if not str(getattr(config, name) or "").strip()
    ]


def check_config(config: StorageConfig) -> Result[StorageConfig, ConfigError]:
    """Validate config as a Result, for use before any network call."""
    missing = validate_config(config)
    if missing:
        return Err(ConfigError.config_invalid(missing))
    return Ok(config)


def is_available(config: Optional[StorageConfig], enabled: bool = True) -> bool:
    """True when uploads are switched on and the config is complete."""
    return bool(enabled and config is not None and not validate_config(config))
