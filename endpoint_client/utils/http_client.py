"""
endpoint_client/utils/http_client.py

WHAT THIS FILE IS FOR
---------------------
This module provides the minimal asynchronous HTTP transport used by
RequestClient to put a RequestDescriptor on the wire.

It exists to:
- Keep every raw `httpx` call in one place
- Standardize timeout handling
- Let callers inject their own `httpx.AsyncClient` (connection reuse,
  proxies, test transports) without RequestClient knowing about it

This client is intentionally kept *very thin*.

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Retry logic
- Status code checks
- Body decoding
- Endpoint validation or URL building

Those responsibilities belong to RequestClient.

CLIENT OWNERSHIP
----------------
- http_client given:    used as-is, never closed here (caller owns it)
- http_client omitted:  a fresh httpx.AsyncClient is opened and closed
                        around every single request
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

import httpx

from endpoint_client.schemas.endpoint_schema import RequestDescriptor

# Timeout can be:
# - None -> wait forever
# - single float -> applied to connect, read, write and pool
# - (connect_timeout, read_timeout)
TimeoutType = Union[None, float, Tuple[float, float]]


def _to_httpx_timeout(timeout: TimeoutType) -> httpx.Timeout:
    if isinstance(timeout, tuple):
        connect, read = timeout
        return httpx.Timeout(read, connect=connect)
    return httpx.Timeout(timeout)


class AsyncHttpClient:
    """
    Minimal asynchronous HTTP transport.

    It intentionally:
    - Does NOT add retries
    - Does NOT interpret status codes
    - Does NOT decode response payloads

    Transport errors (httpx.RequestError and subclasses) propagate
    unchanged to the caller.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: TimeoutType = None,
    ) -> None:
        self.http_client = http_client
        self.timeout_seconds = timeout_seconds

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        """
        Send the request and return the fully read response.

        Raises:
            httpx.RequestError:
                Any network-level error (timeout, DNS, connection error).
        """
        if self.http_client is not None:
            return await self._send_with(self.http_client, request)

        async with httpx.AsyncClient(timeout=_to_httpx_timeout(self.timeout_seconds)) as client:
            return await self._send_with(client, request)

    async def _send_with(self, client: httpx.AsyncClient, request: RequestDescriptor) -> httpx.Response:
        return await client.request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body,
        )
