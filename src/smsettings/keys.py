"""Option addressing.

Field ids are either flat (``archive_slug``) or address one member of a
container option using the bracket syntax of URL query strings
(``notify[email]``).  Only a single level of nesting is supported; anything
deeper raises :class:`~smsettings.errors.OptionPathError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus, unquote_plus

from .errors import OptionPathError

OPTION_PREFIX = "sermonmanager_"
TRANSIENT_MARKER = "__"

_ADDRESS_RX = re.compile(r"^([^\[\]]+)\[([^\[\]]+)\]$")


@dataclass(frozen=True)
class OptionAddress:
    """Resolved storage location of a field."""

    container: str
    member: str | None = None

    @property
    def nested(self) -> bool:
        return self.member is not None

    def to_id(self) -> str:
        """Inverse of :func:`resolve`; addressed parts are percent-encoded."""
        if self.member is None:
            return self.container
        container = quote_plus(self.container, safe="")
        member = quote_plus(self.member, safe="")
        return f"{container}[{member}]"


def resolve(field_id: str) -> OptionAddress:
    if "[" not in field_id and "]" not in field_id:
        return OptionAddress(field_id)
    match = _ADDRESS_RX.match(field_id)
    if match is None:
        raise OptionPathError(f"Unsupported option path '{field_id}'")
    container, member = match.groups()
    return OptionAddress(unquote_plus(container), unquote_plus(member))


def option_key(container: str) -> str:
    return OPTION_PREFIX + container


def is_transient(field_id: str | None) -> bool:
    """Return ``True`` for display-only ids such as ``__preview``."""
    return (
        field_id is not None
        and field_id.startswith(TRANSIENT_MARKER)
        and len(field_id) > len(TRANSIENT_MARKER)
    )


def nest_form(items: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Build a nested payload from flat form pairs.

    ``notify[email]=1`` becomes ``{"notify": {"email": "1"}}`` and names ending
    in ``[]`` accumulate into lists, mirroring how browsers post the controls
    produced by :mod:`smsettings.render`.  Names that cannot be addressed are
    kept verbatim.
    """
    pairs = items.items() if isinstance(items, Mapping) else items
    payload: dict[str, Any] = {}
    for name, value in pairs:
        is_list = name.endswith("[]")
        base = name[:-2] if is_list else name
        try:
            address = resolve(base)
        except OptionPathError:
            payload[name] = value
            continue
        if address.member is None:
            target: dict[str, Any] = payload
            key = address.container
        else:
            group = payload.get(address.container)
            if not isinstance(group, dict):
                group = payload[address.container] = {}
            target = group
            key = address.member
        if is_list:
            current = target.get(key)
            if not isinstance(current, list):
                current = target[key] = []
            current.append(value)
        else:
            target[key] = value
    return payload


__all__ = [
    "OPTION_PREFIX",
    "OptionAddress",
    "resolve",
    "option_key",
    "is_transient",
    "nest_form",
]
