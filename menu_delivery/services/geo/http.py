"""HTTP helper shared by the provider clients."""

import asyncio
from typing import Optional

import httpx


async def get_within(
    client: httpx.AsyncClient,
    url: str,
    deadline: Optional[float] = None,
    **kwargs,
) -> httpx.Response:
    """
    GET url, giving up once deadline seconds have passed.

    httpx timeouts apply to each phase (connect, read, write, pool) on its
    own, so a server trickling bytes can keep a request alive well past
    them. The deadline bounds the whole attempt, body included. Expiry is
    raised as httpx.TimeoutException so callers handle both the same way.
    """
    try:
        return await asyncio.wait_for(client.get(url, **kwargs), timeout=deadline)
    except asyncio.TimeoutError:
        raise httpx.TimeoutException(f"No complete response within {deadline}s") from None
