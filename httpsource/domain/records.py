# /httpsource/domain/records.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from httpsource.domain.validation import DEFAULT_METHOD


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    # private copy; later changes to the caller's dict never show through
    return MappingProxyType(dict(mapping))


# ==== Input ====


@dataclass(frozen=True, slots=True)
class RequestSpec:
    url: str
    method: str = DEFAULT_METHOD
    request_headers: Mapping[str, str] = field(default_factory=dict)
    request_body: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "request_headers", _frozen(self.request_headers))

    def __hash__(self) -> int:
        return hash((self.url, self.method, frozenset(self.request_headers.items()), self.request_body))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> RequestSpec:
        """Build a request from the configuration consumer's attribute map."""
        method = config.get("method")
        return cls(
            url=config.get("url") or "",
            method=DEFAULT_METHOD if method is None else method,
            request_headers=config.get("request_headers") or {},
            request_body=config.get("request_body"),
        )


# ==== Output ====


@dataclass(frozen=True, slots=True)
class ResponseRecord:
    id: str
    status_code: int
    response_body: str
    response_headers: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "response_headers", _frozen(self.response_headers))

    def __hash__(self) -> int:
        return hash((self.id, self.status_code, self.response_body, frozenset(self.response_headers.items())))


@dataclass(frozen=True, slots=True)
class Advisory:
    summary: str
    detail: str


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    record: ResponseRecord
    warnings: tuple[Advisory, ...] = ()


def record_to_state(record: ResponseRecord) -> dict[str, Any]:
    """Map a record to the persisted attribute set, adding the legacy ``body`` alias."""
    return {
        "id": record.id,
        "status_code": record.status_code,
        "response_body": record.response_body,
        "response_headers": dict(record.response_headers),
        # deprecated: use response_body
        "body": record.response_body,
    }
