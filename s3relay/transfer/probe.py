"""
Connection Probe: signed HEAD against the bucket root.

HeadBucket is not billed by S3-compatible providers, so it is a free way
to confirm that endpoint, region, bucket and credentials all line up
before a real upload is attempted.

Status Mapping:
---------------
| Answer                  | Result                      |
|-------------------------|-----------------------------|
| 2xx                     | Ok(Reachable)               |
| 403                     | Err(Forbidden)              |
| 404                     | Err(NotFound)               |
| any other status        | Err(HttpStatus(code, text)) |
| DNS/TLS/refused/timeout | Err(Network(message))       |
| anything else raised    | Err(Unexpected(message))    |

No retries; exactly one request per call; nothing is persisted.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx

from s3relay.core import constants as C
from s3relay.core.config import StorageConfig, check_config
from s3relay.core.errors import RelayError, RemoteError, TransferError
from s3relay.core.types import Err, Ok, Reachable, Result
from s3relay.observability.logging import StructuredLogger
from s3relay.signing.sigv4 import SignatureEngine, bucket_path
from s3relay.transfer.client import TimeoutSpec, client_scope
from s3relay.transfer.metrics import TransferMetrics

logger = StructuredLogger(__name__)


def map_probe_status(response: httpx.Response, bucket: str) -> Result[Reachable, RelayError]:
    """Translate a HEAD answer into the probe result (latency filled in later)."""
    status = response.status_code
    if 200 <= status < 300:
        return Ok(Reachable(status_code=status))
    if status == 403:
        return Err(RemoteError.forbidden(bucket))
    if status == 404:
        return Err(RemoteError.not_found(bucket))
    return Err(RemoteError.http_status(status, response.reason_phrase))


class ConnectionProbe:
    """
    Bucket reachability check.

    Example:
        >>> probe = ConnectionProbe()
        >>> result = await probe.probe(config)
        >>> if result.is_err():
        ...     print(result.error.user_message)
    """

    __slots__ = ("_engine", "_client", "_metrics", "_timeout")

    def __init__(
        self,
        engine: Optional[SignatureEngine] = None,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[TransferMetrics] = None,
        timeout: TimeoutSpec = None,
    ) -> None:
        """
        Args:
            engine: Shared signer (a default one is created when omitted).
            client: Optional shared HTTP client; not closed by the probe.
            metrics: Optional counters to record into.
            timeout: Timeout for an owned client; None imposes none.
        """
        self._engine = engine or SignatureEngine()
        self._client = client
        self._metrics = metrics
        self._timeout = timeout

    async def probe(self, config: StorageConfig) -> Result[Reachable, RelayError]:
        """
        Issue one signed HEAD ``{endpoint}/{bucket}``.

        Returns:
            Ok(Reachable) when the bucket answers 2xx, otherwise Err with
            ConfigInvalid, Forbidden, NotFound, HttpStatus, Network or
            Unexpected.
        """
        log = logger.with_extra(operation="probe", bucket=config.bucket)

        checked = check_config(config)
        if checked.is_err():
            log.warning(
                f"Probe skipped: {checked.error.message}",
                missing_fields=checked.error.missing_fields,
            )
            return checked

        canonical_uri = bucket_path(config.bucket)
        url = config.base_url + canonical_uri[1:]
        signed = self._engine.sign(config, "HEAD", canonical_uri)

        log.info(f"Probing bucket '{config.bucket}' at {signed.host}", host=signed.host)
        start_ns = time.perf_counter_ns()

        try:
            async with client_scope(self._client, self._timeout) as client:
                response = await client.head(url, headers=signed.headers())
        except httpx.TransportError as e:
            self._record(time.perf_counter_ns() - start_ns, ok=False)
            log.warning(f"Probe of '{config.bucket}' failed: {e!r}", host=signed.host)
            return Err(TransferError.network(str(e) or type(e).__name__, cause=e))
        except Exception as e:
            self._record(time.perf_counter_ns() - start_ns, ok=False)
            log.error(
                f"Probe of '{config.bucket}' failed unexpectedly: {e!r}", host=signed.host
            )
            return Err(TransferError.unexpected(str(e) or type(e).__name__, cause=e))

        latency_ns = time.perf_counter_ns() - start_ns
        latency_ms = latency_ns / C.NS_PER_MS
        result = map_probe_status(response, config.bucket)
        self._record(latency_ns, ok=result.is_ok())

        if result.is_ok():
            log.info(
                f"Bucket '{config.bucket}' reachable "
                f"(HTTP {response.status_code}, {latency_ms:.1f}ms)",
                host=signed.host,
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            return Ok(Reachable(status_code=response.status_code, latency_ms=latency_ms))

        log.warning(
            f"Probe of '{config.bucket}' answered HTTP {response.status_code}",
            host=signed.host,
            status_code=response.status_code,
        )
        return result

    def _record(self, latency_ns: int, ok: bool) -> None:
        if self._metrics is not None:
            self._metrics.record_probe(latency_ns, ok)
