# /httpsource/domain/validation.py
from __future__ import annotations

from urllib.parse import urlsplit

from httpsource.domain.errors import ValidationError

DEFAULT_METHOD = "GET"

# Order is part of the error message contract
ALLOWED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")

BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})

SUPPORTED_SCHEMES = ("http", "https")


def validate_method(method: str | None) -> str:
    """Return the effective method or raise ValidationError. Case-sensitive."""
    effective = DEFAULT_METHOD if method is None else method
    if effective not in ALLOWED_METHODS:
        allowed = ", ".join(f'"{m}"' for m in ALLOWED_METHODS)
        raise ValidationError(
            "Invalid request method",
            f'Method "{effective}" not allowed, must be one of: {allowed}',
        )
    return effective


def allows_body(method: str) -> bool:
    return method in BODY_METHODS


def validate_url(url: str | None) -> str:
    """Require an absolute http(s) URL."""
    if not url or not url.strip():
        raise ValidationError("Invalid request URL", "url is required")
    parts = urlsplit(url)
    if parts.scheme.lower() not in SUPPORTED_SCHEMES or not parts.netloc:
        raise ValidationError(
            "Invalid request URL",
            f"{url!r} is not an absolute URL, supported schemes are http and https",
        )
    return url
