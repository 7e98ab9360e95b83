"""
Cooperative cancellation for in-flight transfers.

The caller keeps the token and may trigger it from any coroutine or
callback running on the same event loop (including the progress callback).
"""

from __future__ import annotations

import asyncio


class CancelToken:
    """
    One-shot cancellation signal.

    Usage:
        token = CancelToken()
        task = asyncio.create_task(transport.upload(..., cancel_token=token))
        ...
        token.cancel()
        result = await task   # UploadResult with a Cancelled error
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"
