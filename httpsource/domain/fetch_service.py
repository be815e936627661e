# /httpsource/domain/fetch_service.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence

from httpsource.adapters.system.logging_cfg import configure_logger
from httpsource.config import settings
from httpsource.domain.content_type import classify_content_type
from httpsource.domain.errors import StrictStatusError, TransportError
from httpsource.domain.headers import flatten_headers
from httpsource.domain.records import Advisory, FetchOutcome, RequestSpec, ResponseRecord
from httpsource.domain.validation import allows_body, validate_method, validate_url
from httpsource.ports.http_client import HTTPClientPort, RawResponse

LOG = logging.getLogger("fetch_service")
configure_logger()

UNSAFE_CONTENT_DETAIL = (
    "If the content is binary data, the consumer may not properly handle "
    "the contents of the response."
)


# ==== Service ====


class FetchExecutor:
    """Validates, sends and normalizes a single request over an injected client."""

    def __init__(
        self,
        client: HTTPClientPort,
        *,
        timeout_seconds: float | None = None,
        strict_status: bool | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.client = client
        self.timeout_seconds = settings.TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self.strict_status = settings.STRICT_STATUS if strict_status is None else strict_status
        self.user_agent = user_agent

    # --- request side ---

    def _build_headers(self, spec: RequestSpec) -> dict[str, str]:
        headers = dict(spec.request_headers)
        if self.user_agent and not any(k.lower() == "user-agent" for k in headers):
            headers["User-Agent"] = self.user_agent
        return headers

    @staticmethod
    def _build_body(method: str, spec: RequestSpec) -> str | None:
        if spec.request_body is None:
            return None
        if not allows_body(method):
            LOG.info("fetch.body_dropped", extra={"extra": {"method": method, "url": spec.url}})
            return None
        return spec.request_body

    async def _race_cancel(self, method: str, url: str, send, cancel: asyncio.Event) -> RawResponse:
        task = asyncio.ensure_future(send)
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                # wait for the client to unwind so the connection is released
                await asyncio.gather(task, return_exceptions=True)

        if task in done:
            return task.result()

        LOG.warning("fetch.cancelled", extra={"extra": {"method": method, "url": url}})
        cause = asyncio.CancelledError("cancelled by caller")
        raise TransportError("Error making request", f"{method} {url} cancelled by caller", cause=cause) from cause

    async def _dispatch(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None,
        cancel: asyncio.Event | None,
    ) -> RawResponse:
        send = self.client.send(method, url, headers=headers, body=body)
        try:
            async with asyncio.timeout(self.timeout_seconds):
                if cancel is None:
                    return await send
                return await self._race_cancel(method, url, send, cancel)
        except TimeoutError as e:
            LOG.warning(
                "fetch.timeout",
                extra={"extra": {"method": method, "url": url, "timeout": self.timeout_seconds}},
            )
            raise TransportError(
                "Error making request",
                f"{method} {url} timed out after {self.timeout_seconds}s",
                cause=e,
            ) from e

    # --- response side ---

    def _check_status(self, status: int, url: str) -> None:
        if self.strict_status and not 200 <= status < 300:
            LOG.warning("fetch.status_rejected", extra={"extra": {"url": url, "status": status}})
            raise StrictStatusError(status, url)

    @staticmethod
    def _content_type(headers: Sequence[tuple[str, str]]) -> str:
        for name, value in headers:
            if name.lower() == "content-type":
                return value
        return ""

    def _classify(self, raw: RawResponse, url: str) -> list[Advisory]:
        content_type = self._content_type(raw.headers)
        if classify_content_type(content_type):
            return []
        LOG.warning("fetch.unsafe_content_type", extra={"extra": {"url": url, "content_type": content_type}})
        return [
            Advisory(
                summary=f'Content-Type is not recognized as a text type, got "{content_type}"',
                detail=UNSAFE_CONTENT_DETAIL,
            )
        ]

    # --- primary entrypoint ---

    async def execute(self, spec: RequestSpec, *, cancel: asyncio.Event | None = None) -> FetchOutcome:
        method = validate_method(spec.method)
        url = validate_url(spec.url)
        headers = self._build_headers(spec)
        body = self._build_body(method, spec)

        LOG.info("fetch.dispatch", extra={"extra": {"method": method, "url": url}})
        raw = await self._dispatch(method, url, headers, body, cancel)

        self._check_status(raw.status, url)
        warnings = self._classify(raw, url)

        record = ResponseRecord(
            id=url,
            status_code=raw.status,
            # no transcoding; undecodable bytes become U+FFFD
            response_body=raw.body.decode("utf-8", errors="replace"),
            response_headers=flatten_headers(raw.headers),
        )
        LOG.info(
            "fetch.done",
            extra={"extra": {"url": url, "status": raw.status, "bytes": len(raw.body), "warnings": len(warnings)}},
        )
        return FetchOutcome(record=record, warnings=tuple(warnings))
