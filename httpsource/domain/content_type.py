# /httpsource/domain/content_type.py
"""
Content-Type handling, split in two pure steps:

* ``parse_media_type`` turns a header value into ``(media_type, params)``;
* ``is_text_safe`` decides whether such content can be handed to a consumer as text.

Anything outside the allow-list is reported as unsafe.
"""
from __future__ import annotations

import logging
import re

from httpsource.domain.errors import MediaTypeError

LOG = logging.getLogger("domain.content_type")

# RFC 7230 token characters
_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_TYPE_RE = re.compile(rf"^\s*({_TOKEN})(?:/({_TOKEN}))?\s*$")
_PARAM_RE = re.compile(rf'\s*;\s*({_TOKEN})\s*=\s*({_TOKEN}|"(?:[^"\\]|\\.)*")\s*')
_QUOTED_PAIR = re.compile(r"\\(.)")

_TEXT_SAFE_TYPES = (
    re.compile(r"^text/.+"),
    re.compile(r"^application/json$"),
    re.compile(r"^application/samlmetadata\+xml"),
)
_SAFE_CHARSETS = frozenset({"", "utf-8", "us-ascii"})


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    head, _, _ = value.partition(";")
    m = _TYPE_RE.match(head)
    if m is None:
        raise MediaTypeError(f"malformed media type {value!r}")
    media_type = m.group(1).lower()
    if m.group(2):
        media_type = f"{media_type}/{m.group(2).lower()}"

    params: dict[str, str] = {}
    pos = len(head)
    while pos < len(value):
        pm = _PARAM_RE.match(value, pos)
        if pm is None:
            # a lone trailing ';' is tolerated
            if value[pos:].strip() == ";":
                break
            raise MediaTypeError(f"malformed media type parameter in {value!r}")
        name = pm.group(1).lower()
        raw = pm.group(2)
        if raw.startswith('"'):
            raw = _QUOTED_PAIR.sub(r"\1", raw[1:-1])
        if name in params:
            raise MediaTypeError(f"duplicate parameter {name!r} in {value!r}")
        params[name] = raw
        pos = pm.end()

    return media_type, params


def is_text_safe(media_type: str, params: dict[str, str]) -> bool:
    if not any(p.match(media_type) for p in _TEXT_SAFE_TYPES):
        return False
    return params.get("charset", "").lower() in _SAFE_CHARSETS


def classify_content_type(value: str | None) -> bool:
    """True when a Content-Type header value denotes text safe content."""
    try:
        media_type, params = parse_media_type(value or "")
    except MediaTypeError as e:
        LOG.debug("content_type.unparseable", extra={"extra": {"content_type": value, "error": str(e)}})
        return False
    return is_text_safe(media_type, params)
