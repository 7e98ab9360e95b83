"""
Hash Primitives: SHA-256 and HMAC-SHA256

Foundation of the SigV4 chain. Keys are always raw bytes: intermediate
signing keys are binary digests, and running them through a text encoding
would corrupt them.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Union

BytesOrText = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: BytesOrText) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def sha256_hex(data: BytesOrText) -> str:
    """Return the 64-character lowercase hex SHA-256 of `data` (str is UTF-8)."""
    return hashlib.sha256(_as_bytes(data)).hexdigest()


def hmac_sha256(key: Union[bytes, bytearray, memoryview], message: BytesOrText) -> bytes:
    """
    Return the raw 32-byte HMAC-SHA256 of `message` under `key`.

    Raises:
        TypeError: If `key` is text. Key material must stay binary.
    """
    if isinstance(key, str):
        raise TypeError("HMAC key must be bytes, not str")
    return hmac.new(bytes(key), _as_bytes(message), hashlib.sha256).digest()
