"""
Object Key Generation

Keys have the shape ``YYYY/MMDD/{token}{.ext}``:

- date partition from the local calendar date
- 8-character ``[0-9a-z]`` token mixed from the millisecond clock and a
  random value
- the original extension, lowercased, including the dot

The token is a placeholder, not a content hash: it is neither
cryptographically random nor guaranteed unique. Two keys generated in the
same millisecond differ whenever their random parts differ (about 1 in 2^41
chance of a clash). Downstream consumers rely on the fixed token length.
"""

from __future__ import annotations

import posixpath
import random
from datetime import datetime
from typing import Callable, Optional

from s3relay.core import constants as C

_RANDOM_BITS = 41  # 2^41 < 36^8, so distinct random parts never alias


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _base36(value: int, width: int) -> str:
    alphabet = C.OBJECT_KEY_ALPHABET
    digits = []
    for _ in range(width):
        value, rem = divmod(value, 36)
        digits.append(alphabet[rem])
    return "".join(reversed(digits))


def file_extension(file_name: str) -> str:
    """Lowercased extension of the base name including the dot, or ``""``."""
    base = posixpath.basename(file_name.replace("\\", "/"))
    index = base.rfind(".")
    if index == -1:
        return ""
    return base[index:].lower()


class ObjectKeyGenerator:
    """
    Date-partitioned, weakly unique object keys.

    Clock and RNG are injectable so key shapes can be pinned in tests.
    """

    __slots__ = ("_clock", "_rng")

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._clock = clock or _local_now
        self._rng = rng or random.Random()

    def token(self, moment: datetime) -> str:
        epoch_ms = int(moment.timestamp() * 1000)
        seed = (epoch_ms << _RANDOM_BITS) | self._rng.getrandbits(_RANDOM_BITS)
        return _base36(seed, C.OBJECT_KEY_TOKEN_LENGTH)

    def generate(self, original_file_name: str) -> str:
        """Return ``YYYY/MMDD/{token}{.ext}`` for the given file name."""
        now = self._clock()
        return (
            f"{now.year:04d}/{now.month:02d}{now.day:02d}/"
            f"{self.token(now)}{file_extension(original_file_name)}"
        )
