"""
HTTP transport for the Yahoo Finance client.
Thin wrapper around httpx.AsyncClient returning status and body.
"""

import asyncio
from typing import NamedTuple, Optional

import httpx
from loguru import logger

from yfkit.core.config import settings


class RawResponse(NamedTuple):
    status: int
    body: str


class HttpTransport:
    """
    One pooled httpx.AsyncClient per event loop, shared by every request of a client.

    Pooled connections belong to the loop that opened them, so a client used
    from a new loop (a second asyncio.run) gets a fresh pool.

    Transport failures (timeouts, connection errors) propagate as
    httpx.TransportError subclasses; non-2xx statuses are returned, not raised.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazily create the pooled client for the running loop."""
        loop = asyncio.get_running_loop()
        if self._client is None or self._loop is not loop:
            if self._client is not None:
                logger.debug("Event loop changed, opening a new connection pool")
            self._loop = loop
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def get(self, url: str) -> RawResponse:
        response = await self.client.get(url)
        logger.debug(f"GET {url} -> {response.status_code} ({len(response.content)} bytes)")
        return RawResponse(status=response.status_code, body=response.text)

    async def aclose(self) -> None:
        client, loop = self._client, self._loop
        self._client, self._loop = None, None
        # A pool left behind by a finished loop cannot be closed from this one.
        if client is not None and loop is asyncio.get_running_loop():
            await client.aclose()
