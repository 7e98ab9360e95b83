"""
Integration Tests: Connection Probe

Runs the probe against httpx.MockTransport in place of a bucket.
"""

import logging

import httpx
import pytest

from s3relay.core.config import StorageConfig
from s3relay.core.errors import ConfigError, ErrorCode
from s3relay.transfer.metrics import TransferMetrics
from s3relay.transfer.probe import ConnectionProbe


async def run_probe(config, transport, engine, metrics=None):
    async with httpx.AsyncClient(transport=transport) as client:
        probe = ConnectionProbe(engine=engine, client=client, metrics=metrics)
        return await probe.probe(config)


class TestConnectionProbe:
    """Tests for ConnectionProbe.probe."""

    @pytest.mark.parametrize("status", [200, 204])
    @pytest.mark.asyncio
    async def test_reachable(self, config, fixed_engine, make_transport, status):
        transport = make_transport(lambda request: httpx.Response(status))
        metrics = TransferMetrics()

        result = await run_probe(config, transport, fixed_engine, metrics)

        assert result.is_ok()
        assert result.unwrap().status_code == status
        assert result.unwrap().latency_ms >= 0
        assert metrics.probe_count == 1
        assert metrics.probe_failures == 0

    @pytest.mark.asyncio
    async def test_single_signed_head(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(200))

        await run_probe(config, transport, fixed_engine)

        assert len(transport.requests) == 1
        request = transport.requests[0]
        assert request.method == "HEAD"
        assert str(request.url) == "https://s3.amazonaws.com/mybucket"
        assert request.headers["host"] == "s3.amazonaws.com"
        assert request.headers["x-amz-date"] == "20250101T000000Z"
        assert request.headers["x-amz-content-sha256"] == "UNSIGNED-PAYLOAD"
        assert request.headers["authorization"].startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20250101/us-east-1/s3/aws4_request, "
        )
        assert config.secret_access_key not in str(request.headers)

    @pytest.mark.asyncio
    async def test_forbidden(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(403))
        metrics = TransferMetrics()

        result = await run_probe(config, transport, fixed_engine, metrics)

        assert result.is_err()
        assert result.error.code is ErrorCode.REMOTE_FORBIDDEN
        assert "mybucket" in result.error.user_message
        assert metrics.probe_failures == 1

    @pytest.mark.asyncio
    async def test_not_found(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(404))

        result = await run_probe(config, transport, fixed_engine)

        assert result.error.code is ErrorCode.REMOTE_NOT_FOUND
        assert result.error.kind == "NotFound"

    @pytest.mark.asyncio
    async def test_other_status(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(500))

        result = await run_probe(config, transport, fixed_engine)

        assert result.error.code is ErrorCode.REMOTE_HTTP_STATUS
        assert result.error.status_code == 500
        assert result.error.message == "HTTP 500 Internal Server Error"

    @pytest.mark.asyncio
    async def test_network_error(self, config, fixed_engine, make_transport):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await run_probe(config, make_transport(refuse), fixed_engine)

        assert result.error.code is ErrorCode.TRANSFER_NETWORK
        assert "connection refused" in result.error.message

    @pytest.mark.asyncio
    async def test_timeout_is_network(self, config, fixed_engine, make_transport):
        def stall(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = await run_probe(config, make_transport(stall), fixed_engine)

        assert result.error.kind == "Network"

    @pytest.mark.asyncio
    async def test_incomplete_config_sends_nothing(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(200))

        result = await run_probe(
            config.with_changes(access_key_id=""), transport, fixed_engine
        )

        assert result.error.code is ErrorCode.CONFIG_INVALID
        assert result.error.missing_fields == ["access_key_id"]
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_endpoint_trailing_slash(self, config, fixed_engine, make_transport):
        transport = make_transport(lambda request: httpx.Response(200))

        await run_probe(
            config.with_changes(endpoint="https://s3.amazonaws.com/"), transport, fixed_engine
        )

        assert str(transport.requests[0].url) == "https://s3.amazonaws.com/mybucket"

    @pytest.mark.parametrize(
        "failure",
        [httpx.InvalidURL("Invalid non-printable ASCII character in URL"), RuntimeError("boom")],
    )
    @pytest.mark.asyncio
    async def test_other_exceptions_are_unexpected(
        self, config, fixed_engine, make_transport, failure
    ):
        def explode(request):
            raise failure

        metrics = TransferMetrics()
        result = await run_probe(config, make_transport(explode), fixed_engine, metrics)

        assert result.is_err()
        assert result.error.code is ErrorCode.INTERNAL_UNEXPECTED
        assert result.error.cause is failure
        assert metrics.probe_failures == 1

    def test_unusable_endpoint_rejected_before_probing(self, config):
        with pytest.raises(ConfigError) as exc:
            StorageConfig(
                endpoint="https://exa\x7fmple.com",
                region=config.region,
                bucket=config.bucket,
                access_key_id=config.access_key_id,
                secret_access_key=config.secret_access_key,
            )
        assert isinstance(exc.value, ValueError)
        assert exc.value.code is ErrorCode.CONFIG_INVALID
        assert exc.value.context["field"] == "endpoint"


class TestProbeLogging:
    """Probe log records carry structured fields."""

    @pytest.mark.asyncio
    async def test_fields_on_records(self, config, fixed_engine, make_transport, caplog):
        transport = make_transport(lambda request: httpx.Response(403))

        with caplog.at_level(logging.INFO, logger="s3relay.transfer.probe"):
            await run_probe(config, transport, fixed_engine)

        records = [r for r in caplog.records if r.name == "s3relay.transfer.probe"]
        assert records
        assert all(r.operation == "probe" and r.bucket == "mybucket" for r in records)
        answered = [r for r in records if getattr(r, "status_code", None) == 403]
        assert len(answered) == 1
        assert answered[0].host == "s3.amazonaws.com"
        assert config.secret_access_key not in caplog.text
