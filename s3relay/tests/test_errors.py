"""
Unit Tests: Error Taxonomy and Result Types
"""

import pytest

from s3relay.core.errors import (
    ConfigError,
    ErrorCode,
    RelayError,
    RemoteError,
    TransferError,
)
from s3relay.core.types import Err, Ok, ProgressEvent, UploadResult


class TestResult:
    """Tests for Ok/Err."""

    def test_ok(self):
        result = Ok(2)
        assert result.is_ok() and not result.is_err()
        assert result.map(lambda v: v * 3).unwrap() == 6
        assert result.flat_map(lambda v: Err("no")).is_err()
        assert result.unwrap_or(0) == 2

    def test_err(self):
        result = Err("bad")
        assert result.is_err()
        assert result.map(lambda v: v * 3) is result
        assert result.unwrap_or(0) == 0
        with pytest.raises(RuntimeError):
            result.unwrap()


class TestErrors:
    """Tests for the RelayError hierarchy."""

    def test_kinds(self):
        assert ConfigError.config_invalid(["bucket"]).kind == "ConfigInvalid"
        assert TransferError.too_large(2, 1).kind == "TooLarge"
        assert TransferError.network("refused").kind == "Network"
        assert TransferError.cancelled().kind == "Cancelled"
        assert TransferError.unexpected("x").kind == "Unexpected"
        assert RemoteError.forbidden("b").kind == "Forbidden"
        assert RemoteError.not_found("b").kind == "NotFound"
        assert RemoteError.http_status(500, "Internal Server Error").kind == "HttpStatus"

    def test_every_code_has_kind(self):
        for code in ErrorCode:
            assert RelayError(code=code, message="m").kind

    def test_is_exception(self):
        with pytest.raises(RelayError):
            raise TransferError.network("refused")

    def test_cancelled_is_neutral(self):
        assert TransferError.cancelled().is_cancelled
        assert not TransferError.network("x").is_cancelled

    def test_messages(self):
        assert "bucket, region" in ConfigError.config_invalid(["bucket", "region"]).message
        assert "500 MiB" in TransferError.too_large(600 * 1024 * 1024, 500 * 1024 * 1024).message
        assert RemoteError.http_status(502, "Bad Gateway").message == "HTTP 502 Bad Gateway"
        assert RemoteError.http_status(599, "").message == "HTTP 599"

    def test_with_context_returns_new(self):
        error = RemoteError.forbidden("media")
        enriched = error.with_context(operation="probe")
        assert enriched is not error
        assert isinstance(enriched, RemoteError)
        assert enriched.error_id == error.error_id
        assert enriched.context["operation"] == "probe"
        assert "operation" not in error.context

    def test_to_dict(self):
        data = RemoteError.not_found("media").to_dict()
        assert data["kind"] == "NotFound"
        assert data["code"] == "REMOTE_NOT_FOUND"
        assert data["code_value"] == 3002
        assert data["context"]["bucket"] == "media"


class TestUploadResult:
    """Tests for UploadResult and ProgressEvent."""

    def test_failed(self):
        result = UploadResult.failed(TransferError.cancelled())
        assert not result.success
        assert result.cancelled
        assert result.access_url is None
        assert result.to_result().is_err()

    def test_progress_percent(self):
        assert ProgressEvent(bytes_sent=1, bytes_total=3).percent == 33
        assert ProgressEvent(bytes_sent=0, bytes_total=0).fraction == 1.0
