# /httpsource/adapters/http/aiohttp_client.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

import aiohttp

from httpsource.config import settings
from httpsource.domain.errors import BodyReadError, TransportError
from httpsource.ports.http_client import RawResponse

LOG = logging.getLogger("adapter.http_client")


class AiohttpClient:
    """
    Loop-aware aiohttp implementation of HTTPClientPort.
    The session is created lazily and rebuilt when the running event loop
    changes, so a client shared between asyncio.run() calls never touches a
    closed loop. TLS uses the default trust store.
    """

    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        total = settings.TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self._timeout = aiohttp.ClientTimeout(total=total)
        self._session: aiohttp.ClientSession | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    async def __aenter__(self) -> AiohttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        loop = asyncio.get_running_loop()
        if self._loop is not None and self._loop is not loop:
            # session belongs to another (likely closed) loop -> drop it
            try:
                if self._session and not self._session.closed:
                    await self._session.close()
            finally:
                self._session = None
                self._loop = None

        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, raise_for_status=False)
            self._loop = loop

        return self._session

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str | None,
    ) -> RawResponse:
        sess = await self._ensure_session()
        try:
            async with sess.request(method, url, headers=dict(headers), data=body, allow_redirects=True) as resp:
                try:
                    payload = await resp.read()
                except (TimeoutError, aiohttp.ClientError) as e:
                    LOG.warning(
                        "body_read_failed",
                        extra={"extra": {"method": method, "url": url, "error": repr(e)}},
                    )
                    raise BodyReadError("Error reading response body", f"{method} {url}: {e!r}", cause=e) from e
                return RawResponse(
                    status=resp.status,
                    headers=[(name, value) for name, value in resp.headers.items()],
                    body=payload,
                )
        except (TimeoutError, aiohttp.ClientError, ValueError) as e:
            # InvalidURL and malformed header values surface as ValueError
            LOG.warning(
                "request_failed",
                extra={"extra": {"method": method, "url": url, "error": repr(e)}},
            )
            raise TransportError("Error making request", f"{method} {url}: {e!r}", cause=e) from e

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._loop = None
