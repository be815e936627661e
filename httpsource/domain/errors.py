# /httpsource/domain/errors.py
from __future__ import annotations


class FetchError(Exception):
    """Base for every fatal failure of a fetch invocation."""

    def __init__(self, operation: str, detail: str, *, cause: BaseException | None = None) -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail
        self.cause = cause


class ValidationError(FetchError):
    """Rejected input; raised before any network I/O."""


class TransportError(FetchError):
    """Request construction, network failure, timeout or cancellation."""


class StrictStatusError(FetchError):
    """Non-2xx status while strict status checking is enabled."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__("Error checking response status", f"{url} returned non-2xx status {status_code}")
        self.status_code = status_code
        self.url = url


class BodyReadError(FetchError):
    """The body could not be fully read; nothing partial is kept."""


class MediaTypeError(ValueError):
    pass
