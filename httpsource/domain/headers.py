# /httpsource/domain/headers.py
from __future__ import annotations

from collections.abc import Iterable

HEADER_VALUE_SEPARATOR = ", "


def flatten_headers(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """
    Collapse repeated header fields into one value per name (RFC 7230 3.2.2).
    Names compare case-insensitively; the first spelling seen is kept and the
    values are joined in the order the server sent them.
    """
    names: dict[str, str] = {}
    values: dict[str, list[str]] = {}
    for name, value in pairs:
        key = name.lower()
        names.setdefault(key, name)
        values.setdefault(key, []).append(value)
    return {names[k]: HEADER_VALUE_SEPARATOR.join(v) for k, v in values.items()}
