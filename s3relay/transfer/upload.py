"""
Upload Transport: signed single-request PUT with progress and cancellation
==========================================================================

Streams a file to ``{endpoint}/{bucket}/{path_prefix}{object_key}``.

Lifecycle:
----------
1. Fail fast, with zero requests, on incomplete config or oversized files
2. Generate the object key and sign ``PUT`` with UNSIGNED-PAYLOAD
3. Stream the body in chunks; report progress after each chunk is taken
   by the transport
4. Race the request against the cancel token; a triggered token aborts
   the request task (closing its connection) and wins over any answer
5. Map the answer to exactly one terminal UploadResult

Guarantees:
-----------
- bytes_sent strictly increases across progress events
- no progress event fires after cancellation or after the result
- a cancelled upload never reports success
- no retries; the caller decides whether to try again
"""

from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, Optional, Union

import httpx

from s3relay.core import constants as C
from s3relay.core.config import StorageConfig, check_config
from s3relay.core.errors import ErrorCode, RelayError, RemoteError, TransferError
from s3relay.core.types import Err, Ok, ProgressCallback, ProgressEvent, Result, UploadResult
from s3relay.observability.logging import StructuredLogger
from s3relay.signing.sigv4 import SignatureEngine, bucket_path, uri_encode
from s3relay.transfer.cancellation import CancelToken
from s3relay.transfer.client import TimeoutSpec, client_scope
from s3relay.transfer.keys import ObjectKeyGenerator
from s3relay.transfer.metrics import TransferMetrics

logger = StructuredLogger(__name__)

FileBytes = Union[bytes, bytearray, memoryview]


class _TransferAborted(Exception):
    """Raised inside the body stream once cancellation is requested."""


class _ProgressReporter:
    """Forwards progress to the caller until closed or cancelled."""

    __slots__ = ("_total", "_callback", "_token", "_sent", "_closed")

    def __init__(
        self,
        total: int,
        callback: Optional[ProgressCallback],
        token: CancelToken,
    ) -> None:
        self._total = total
        self._callback = callback
        self._token = token
        self._sent = 0
        self._closed = False

    @property
    def bytes_sent(self) -> int:
        return self._sent

    def advance(self, count: int) -> None:
        if self._closed or self._token.cancelled or count <= 0:
            return
        self._sent += count
        if self._callback is not None:
            self._callback(ProgressEvent(bytes_sent=self._sent, bytes_total=self._total))

    def close(self) -> None:
        self._closed = True


def build_access_url(config: StorageConfig, full_key: str, upload_url: str) -> str:
    """
    Public address of an uploaded object.

    ``{custom_domain}/{path_prefix}{object_key}`` when a custom domain is
    configured, otherwise the upload URL itself. `full_key` already
    includes the path prefix.
    """
    if config.custom_domain and config.custom_domain.strip():
        return (
            config.custom_domain.strip().rstrip("/") + "/"
            + uri_encode(full_key)
        )
    return upload_url


class UploadTransport:
    """
    Signed PUT uploads to an S3-compatible bucket.

    One instance may serve many sequential uploads; concurrent uploads
    should each use their own instance (or at least their own cancel token).

    Example:
        >>> transport = UploadTransport()
        >>> token = CancelToken()
        >>> result = await transport.upload(
        ...     config, data, "photo.png", "image/png",
        ...     on_progress=lambda e: print(e.percent), cancel_token=token,
        ... )
        >>> result.access_url
    """

    __slots__ = (
        "_engine",
        "_keys",
        "_client",
        "_chunk_size",
        "_metrics",
        "_timeout",
        "_max_bytes",
    )

    def __init__(
        self,
        engine: Optional[SignatureEngine] = None,
        key_generator: Optional[ObjectKeyGenerator] = None,
        client: Optional[httpx.AsyncClient] = None,
        chunk_size: int = C.DEFAULT_CHUNK_BYTES,
        metrics: Optional[TransferMetrics] = None,
        timeout: TimeoutSpec = None,
        max_bytes: int = C.MAX_UPLOAD_BYTES,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        self._engine = engine or SignatureEngine()
        self._keys = key_generator or ObjectKeyGenerator()
        self._client = client
        self._chunk_size = chunk_size
        self._metrics = metrics
        self._timeout = timeout
        self._max_bytes = max_bytes

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    async def upload(
        self,
        config: StorageConfig,
        data: FileBytes,
        file_name: str,
        mime_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> UploadResult:
        """
        Upload one file.

        Args:
            config: Complete storage configuration.
            data: File contents.
            file_name: Original file name; only its extension reaches the key.
            mime_type: Declared content type (octet-stream when blank).
            on_progress: Called with ProgressEvent as the body is sent.
            cancel_token: Caller-held handle to abort the transfer.

        Returns:
            Exactly one UploadResult; failures carry ConfigInvalid, TooLarge,
            HttpStatus, Network, Cancelled or Unexpected.
        """
        token = cancel_token or CancelToken()
        log = logger.with_extra(operation="upload", bucket=config.bucket)

        checked = check_config(config)
        if checked.is_err():
            log.warning(
                f"Upload rejected: {checked.error.message}",
                missing_fields=checked.error.missing_fields,
            )
            return self._failed(checked.error)

        size = len(data)
        if size > self._max_bytes:
            log.warning(
                f"Upload rejected: {size} bytes exceeds {self._max_bytes}",
                size_bytes=size,
                limit_bytes=self._max_bytes,
            )
            return self._failed(TransferError.too_large(size, self._max_bytes))

        if token.cancelled:
            return self._failed(TransferError.cancelled())

        object_key = config.prefix + self._keys.generate(file_name)
        canonical_uri = bucket_path(config.bucket, object_key)
        upload_url = config.base_url + canonical_uri[1:]
        content_type = (mime_type or "").strip() or C.DEFAULT_CONTENT_TYPE

        signed = self._engine.sign(config, "PUT", canonical_uri)
        headers = signed.headers()
        headers[C.HEADER_CONTENT_TYPE] = content_type
        headers[C.HEADER_CONTENT_LENGTH] = str(size)

        reporter = _ProgressReporter(size, on_progress, token)
        with StructuredLogger.context(
            operation="upload",
            bucket=config.bucket,
            host=signed.host,
            object_key=object_key,
        ):
            log.info(
                f"Uploading {size} bytes to bucket '{config.bucket}' "
                f"as '{object_key}' ({content_type})",
                size_bytes=size,
                content_type=content_type,
            )
            start_ns = time.perf_counter_ns()

            try:
                async with client_scope(self._client, self._timeout) as client:
                    outcome = await self._exchange(
                        client, upload_url, headers, self._body(data, reporter, token), token
                    )
            finally:
                reporter.close()

            if outcome.is_err():
                return self._failed(outcome.error)

            response = outcome.unwrap()
            if not 200 <= response.status_code < 300:
                log.warning(
                    f"Upload of '{object_key}' answered HTTP {response.status_code}",
                    status_code=response.status_code,
                )
                return self._failed(
                    RemoteError.http_status(response.status_code, response.reason_phrase)
                )

            latency_ns = time.perf_counter_ns() - start_ns
            latency_ms = latency_ns / C.NS_PER_MS
            if self._metrics is not None:
                self._metrics.record_upload(size, latency_ns)
            log.info(
                f"Uploaded '{object_key}' ({size} bytes, {latency_ms:.1f}ms)",
                status_code=response.status_code,
                size_bytes=size,
                latency_ms=latency_ms,
            )
        return UploadResult.ok(
            access_url=build_access_url(config, object_key, upload_url),
            original_file_name=file_name,
            mime_type=content_type,
            object_key=object_key,
        )

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    async def _body(
        self,
        data: FileBytes,
        reporter: _ProgressReporter,
        token: CancelToken,
    ) -> AsyncIterator[bytes]:
        view = memoryview(data)
        for offset in range(0, len(view), self._chunk_size):
            if token.cancelled:
                raise _TransferAborted()
            chunk = bytes(view[offset:offset + self._chunk_size])
            yield chunk
            # Resumed: the transport has taken the chunk
            if token.cancelled:
                raise _TransferAborted()
            reporter.advance(len(chunk))

    async def _exchange(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        body: AsyncIterator[bytes],
        token: CancelToken,
    ) -> Result[httpx.Response, RelayError]:
        """Run the PUT, racing it against the cancel token."""
        request_task = asyncio.ensure_future(client.put(url, headers=headers, content=body))
        cancel_waiter = asyncio.ensure_future(token.wait())

        try:
            await asyncio.wait(
                {request_task, cancel_waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            request_task.cancel()
            cancel_waiter.cancel()
            raise
        cancel_waiter.cancel()

        if token.cancelled:
            if not request_task.done():
                request_task.cancel()
            await asyncio.gather(request_task, return_exceptions=True)
            logger.info("Upload cancelled by caller")
            return Err(TransferError.cancelled())

        try:
            return Ok(request_task.result())
        except httpx.TransportError as e:
            logger.warning(f"Upload failed: {e!r}")
            return Err(TransferError.network(str(e) or type(e).__name__, cause=e))
        except Exception as e:
            logger.error(f"Upload failed unexpectedly: {e!r}")
            return Err(TransferError.unexpected(str(e) or type(e).__name__, cause=e))

    def _failed(self, error: RelayError) -> UploadResult:
        if self._metrics is not None:
            self._metrics.record_upload_failure(
                cancelled=error.is_cancelled,
                network=error.code is ErrorCode.TRANSFER_NETWORK,
            )
        return UploadResult.failed(error)
