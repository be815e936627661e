# /httpsource/ports/http_client.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RawResponse:
    status: int
    headers: Sequence[tuple[str, str]]  # (name, value) in emission order
    body: bytes


class HTTPClientPort(Protocol):
    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str | None,
    ) -> RawResponse:
        """Send one request and return the fully read response.

        Raises TransportError for connection level failures and BodyReadError
        when the body cannot be read after the status line arrived.
        """
