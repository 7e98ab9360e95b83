"""
Transfer metrics: counters for probes and uploads.

Optional; a probe or transport only records into an instance it was given.
No credentials, URLs with signatures or object contents are recorded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from s3relay.core import constants as C


@dataclass(slots=True)
class TransferMetrics:
    """
    Nanosecond-precision counters for signed requests.

    Tracks upload throughput, probe latency and failure kinds.
    """
    # Operation counters
    probe_count: int = 0
    upload_count: int = 0

    # Outcome counters
    probe_failures: int = 0
    upload_failures: int = 0
    cancellations: int = 0
    network_errors: int = 0

    # Byte counters
    bytes_uploaded: int = 0

    # Latency accumulators (nanoseconds)
    probe_latency_sum_ns: int = 0
    upload_latency_sum_ns: int = 0

    def record_probe(self, latency_ns: int, ok: bool) -> None:
        self.probe_count += 1
        self.probe_latency_sum_ns += latency_ns
        if not ok:
            self.probe_failures += 1

    def record_upload(self, size_bytes: int, latency_ns: int) -> None:
        """Record a completed upload."""
        self.upload_count += 1
        self.bytes_uploaded += size_bytes
        self.upload_latency_sum_ns += latency_ns

    def record_upload_failure(self, cancelled: bool = False, network: bool = False) -> None:
        if cancelled:
            self.cancellations += 1
            return
        self.upload_failures += 1
        if network:
            self.network_errors += 1

    def get_upload_throughput_mbps(self) -> float:
        """Calculate average upload throughput in MB/s."""
        if self.upload_latency_sum_ns == 0:
            return 0.0
        seconds = self.upload_latency_sum_ns / C.NS_PER_S
        return (self.bytes_uploaded / 1_000_000) / seconds

    def get_probe_latency_ms(self) -> float:
        """Average probe latency in milliseconds."""
        if self.probe_count == 0:
            return 0.0
        return self.probe_latency_sum_ns / self.probe_count / C.NS_PER_MS

    def snapshot(self) -> dict[str, Any]:
        return {
            "probe_count": self.probe_count,
            "probe_failures": self.probe_failures,
            "upload_count": self.upload_count,
            "upload_failures": self.upload_failures,
            "cancellations": self.cancellations,
            "network_errors": self.network_errors,
            "bytes_uploaded": self.bytes_uploaded,
            "upload_throughput_mbps": self.get_upload_throughput_mbps(),
            "probe_latency_ms": self.get_probe_latency_ms(),
        }
