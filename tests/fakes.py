# tests/fakes.py
from __future__ import annotations

import asyncio

from httpsource.ports.http_client import RawResponse


class FakeHTTPClient:
    """Returns a canned response (or raises) and records every send() call."""

    def __init__(self, response: RawResponse | None = None, error: BaseException | None = None) -> None:
        self.response = response or RawResponse(status=200, headers=[("Content-Type", "text/plain")], body=b"")
        self.error = error
        self.calls: list[dict] = []

    async def send(self, method, url, *, headers, body):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if self.error is not None:
            raise self.error
        return self.response


class HangingHTTPClient:
    """Never answers; remembers whether it was cancelled."""

    def __init__(self) -> None:
        self.cancelled = False

    async def send(self, method, url, *, headers, body):
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        raise AssertionError("unreachable")
