"""
Shared fixtures: storage configs, a frozen signing clock, and a recording
mock HTTP transport.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Awaitable, Callable, Union

import httpx
import pytest

from s3relay.core.config import Provider, StorageConfig
from s3relay.signing.sigv4 import SignatureEngine
from s3relay.transfer.keys import ObjectKeyGenerator

FIXED_NOW = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def config() -> StorageConfig:
    return StorageConfig(
        provider=Provider.AWS,
        endpoint="https://s3.amazonaws.com",
        region="us-east-1",
        bucket="mybucket",
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
    )


@pytest.fixture
def fixed_engine() -> SignatureEngine:
    return SignatureEngine(clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_keys() -> ObjectKeyGenerator:
    return ObjectKeyGenerator(
        clock=lambda: datetime(2025, 3, 7, 12, 30, 0, tzinfo=timezone.utc),
        rng=random.Random(42),
    )


@pytest.fixture
def make_transport() -> Callable[[Handler], RecordingTransport]:
    return RecordingTransport
