"""
Unit Tests: Storage Configuration

Tests:
    - Completeness validation and field order
    - Provider defaults
    - Loading from persisted settings and environment
    - Derived host/base URL
    - Secret hygiene
"""

import pytest

from s3relay.core.config import (
    Provider,
    StorageConfig,
    check_config,
    is_available,
    validate_config,
)
from s3relay.core.errors import ConfigError, ErrorCode


class TestValidateConfig:
    """Tests for validate_config."""

    def test_complete(self, config):
        assert validate_config(config) == []
        assert check_config(config).is_ok()

    def test_empty_lists_all_in_order(self):
        assert validate_config(StorageConfig()) == [
            "endpoint",
            "region",
            "bucket",
            "access_key_id",
            "secret_access_key",
        ]

    def test_whitespace_counts_as_blank(self, config):
        blank = config.with_changes(bucket="   ", secret_access_key="\t")
        assert validate_config(blank) == ["bucket", "secret_access_key"]

    def test_optional_fields_not_required(self, config):
        assert config.custom_domain is None
        assert config.path_prefix is None
        assert validate_config(config) == []

    def test_check_config_error(self, config):
        result = check_config(config.with_changes(region=""))
        assert result.is_err()
        assert result.error.code is ErrorCode.CONFIG_INVALID
        assert result.error.kind == "ConfigInvalid"
        assert result.error.missing_fields == ["region"]

    def test_is_available(self, config):
        assert is_available(config)
        assert not is_available(config, enabled=False)
        assert not is_available(None)
        assert not is_available(config.with_changes(bucket=""))


class TestProvider:
    """Tests for provider presets."""

    def test_parse(self):
        assert Provider.parse("AWS") is Provider.AWS
        assert Provider.parse(" r2 ") is Provider.R2
        assert Provider.parse("") is Provider.CUSTOM
        assert Provider.parse(None) is Provider.CUSTOM

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Provider.parse("gcs")

    def test_aws_defaults(self):
        config = StorageConfig.for_provider(Provider.AWS)
        assert config.endpoint == "https://s3.amazonaws.com"
        assert config.region == "us-east-1"

    def test_r2_defaults(self):
        config = StorageConfig.for_provider(Provider.R2)
        assert config.endpoint == ""
        assert config.region == "auto"

    def test_explicit_fields_win(self):
        config = StorageConfig.for_provider(Provider.AWS, region="eu-central-1")
        assert config.region == "eu-central-1"


class TestStorageConfig:
    """Tests for StorageConfig construction and derived values."""

    @pytest.mark.parametrize(
        "endpoint",
        ["s3.amazonaws.com", "ftp://example.com", "https://exa\x7fmple.com", "http://host:99999"],
    )
    def test_invalid_endpoint(self, endpoint):
        with pytest.raises(ValueError) as exc:
            StorageConfig(endpoint=endpoint)
        assert isinstance(exc.value, ConfigError)
        assert exc.value.context["field"] == "endpoint"
        assert exc.value.message.startswith("Storage configuration invalid: endpoint")

    def test_frozen(self, config):
        with pytest.raises(AttributeError):
            config.bucket = "other"  # type: ignore[misc]

    def test_host(self):
        assert StorageConfig(endpoint="https://S3.Example.COM/").host == "s3.example.com"
        assert StorageConfig(endpoint="https://s3.example.com:443").host == "s3.example.com"
        assert StorageConfig(endpoint="http://localhost:9000").host == "localhost:9000"
        assert StorageConfig(endpoint="http://[::1]:9000").host == "[::1]:9000"

    def test_base_url(self):
        assert StorageConfig(endpoint="https://s3.example.com").base_url == (
            "https://s3.example.com/"
        )
        assert StorageConfig(endpoint="https://s3.example.com//").base_url == (
            "https://s3.example.com/"
        )

    def test_secret_key_material(self, config):
        assert config.secret_key_material == (
            b"AWS4wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
        )

    def test_repr_hides_secret(self, config):
        assert config.secret_access_key not in repr(config)
        assert config.secret_access_key not in str(config)


class TestLoading:
    """Tests for from_mapping, from_env and to_mapping."""

    def test_from_mapping_camel_case(self):
        config = StorageConfig.from_mapping({
            "provider": "r2",
            "endpoint": "https://acc.r2.cloudflarestorage.com",
            "region": "auto",
            "bucket": "media",
            "accessKeyId": "AK",
            "secretAccessKey": "SK",
            "customDomain": "https://cdn.x.com",
            "pathPrefix": "up/",
        })
        assert config.provider is Provider.R2
        assert config.access_key_id == "AK"
        assert config.secret_access_key == "SK"
        assert config.custom_domain == "https://cdn.x.com"
        assert config.prefix == "up/"
        assert validate_config(config) == []

    def test_from_mapping_blanks(self):
        config = StorageConfig.from_mapping({"customDomain": "", "pathPrefix": None})
        assert config.provider is Provider.CUSTOM
        assert config.custom_domain is None
        assert config.path_prefix is None
        assert config.prefix == ""

    def test_to_mapping_omits_secret(self, config):
        data = config.to_mapping()
        assert "secretAccessKey" not in data
        assert data["accessKeyId"] == "AKIDEXAMPLE"
        assert config.to_mapping(include_secret=True)["secretAccessKey"] == (
            config.secret_access_key
        )

    def test_mapping_round_trip(self, config):
        restored = StorageConfig.from_mapping(config.to_mapping(include_secret=True))
        assert restored == config

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("S3RELAY_PROVIDER", "aws")
        monkeypatch.setenv("S3RELAY_BUCKET", "media")
        monkeypatch.setenv("S3RELAY_ACCESS_KEY_ID", "AK")
        monkeypatch.setenv("S3RELAY_SECRET_ACCESS_KEY", "SK")
        monkeypatch.setenv("S3RELAY_PATH_PREFIX", "up/")
        monkeypatch.delenv("S3RELAY_ENDPOINT", raising=False)
        monkeypatch.delenv("S3RELAY_REGION", raising=False)
        monkeypatch.delenv("S3RELAY_CUSTOM_DOMAIN", raising=False)

        config = StorageConfig.from_env()
        assert config.endpoint == "https://s3.amazonaws.com"
        assert config.region == "us-east-1"
        assert config.bucket == "media"
        assert config.path_prefix == "up/"
        assert config.custom_domain is None
        assert validate_config(config) == []

    def test_from_env_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_ENDPOINT", "http://localhost:9000")
        monkeypatch.setenv("APP_REGION", "us-east-1")
        config = StorageConfig.from_env("APP")
        assert config.provider is Provider.CUSTOM
        assert config.host == "localhost:9000"
        assert validate_config(config) == ["bucket", "access_key_id", "secret_access_key"]
