"""
HTTP client lifetime for signed requests.

Each operation owns its connection unless the caller injects a shared
``httpx.AsyncClient``; injected clients are left open for the caller.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

import httpx

TimeoutSpec = Union[None, float, httpx.Timeout]


@asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient],
    timeout: TimeoutSpec = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the injected client, or a fresh one closed on exit.

    No timeout is imposed by default; callers that want one pass it here
    or configure their own client. Redirects are not followed, since a
    redirected request would carry a signature for the wrong host.
    """
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        timeout=timeout if isinstance(timeout, httpx.Timeout) else httpx.Timeout(timeout),
        follow_redirects=False,
    ) as owned:
        yield owned
