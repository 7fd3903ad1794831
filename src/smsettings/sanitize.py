"""String sanitization primitives.

``clean`` is the generic text cleaner applied to most field types and
``kses_post`` keeps the safe HTML subset allowed in rich text.  Attribute and
text escaping for output is left to the Jinja2 autoescaping in
:mod:`smsettings.render`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import nh3

_SCRIPT_RX = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RX = re.compile(r"<[^>]*>")
_CONTROL_RX = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WS_RX = re.compile(r"\s+")
_OCTET_RX = re.compile(r"%[a-fA-F0-9]{2}")
_SLASH_RX = re.compile(r"\\(.?)", re.DOTALL)
_TITLE_RX = re.compile(r"[^a-z0-9_]+")

POST_TAGS = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "code", "del", "div", "em",
        "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "li", "ol",
        "p", "pre", "s", "span", "strong", "sub", "sup", "table", "tbody",
        "td", "th", "thead", "tr", "u", "ul",
    }
)

# "rel" is managed by nh3's link_rel and must not be listed here.
POST_ATTRIBUTES = {
    "*": {"class", "id", "style", "title"},
    "a": {"href", "target"},
    "img": {"src", "alt", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def strip_all_tags(text: str) -> str:
    text = _SCRIPT_RX.sub("", text)
    return _TAG_RX.sub("", text)


def clean(value: Any) -> Any:
    """Generic cleaner for single-line input.

    Strips tags and percent-encoded octets, drops control characters,
    collapses whitespace and trims.  Sequences and mappings are cleaned
    element-wise; ``None`` becomes ``""``.
    """
    if isinstance(value, Mapping):
        return {k: clean(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [clean(v) for v in value]
    text = _text(value)
    if "<" in text:
        text = strip_all_tags(text)
    text = _OCTET_RX.sub("", text)
    text = _CONTROL_RX.sub("", text)
    return _WS_RX.sub(" ", text).strip()


def kses_post(value: Any) -> str:
    """Sanitize rich text down to the tags allowed in post content."""
    text = _text(value)
    if not text:
        return ""
    return nh3.clean(text, tags=set(POST_TAGS), attributes={k: set(v) for k, v in POST_ATTRIBUTES.items()})


def unslash(value: Any) -> Any:
    """Remove one level of backslash escaping from strings, recursively."""
    if isinstance(value, str):
        return _SLASH_RX.sub(lambda m: m.group(1), value)
    if isinstance(value, Mapping):
        return {k: unslash(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [unslash(v) for v in value]
    return value


def sanitize_title(value: Any) -> str:
    """Return a lowercase slug usable in class names and hook names."""
    text = strip_all_tags(_text(value)).lower()
    return _TITLE_RX.sub("-", text).strip("-")


__all__ = ["clean", "kses_post", "unslash", "sanitize_title", "strip_all_tags"]
