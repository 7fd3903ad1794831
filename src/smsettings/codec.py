"""Type-driven sanitization of submitted values.

Each field type maps to a small codec in :data:`CODEC_REGISTRY`.  The
:class:`ValueCodec` runs the type codec, then the field's registered sanitize
callback, then the ``sm_admin_settings_sanitize_option`` filters.  A ``None``
result means the field must not be persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from .hooks import Hooks
from .keys import resolve
from .pages import PageLister
from .sanitize import clean, kses_post
from .schema import FieldSchema

logger = logging.getLogger(__name__)

NONE_LABEL = "-- None --"

SANITIZE_FILTER = "sm_admin_settings_sanitize_option"

_TRUE_WORDS = {"yes", "1", "true", "on"}
_FALSE_WORDS = {"no", "0", "false", "off", ""}


def is_empty(value: Any) -> bool:
    """Emptiness as page definitions understand it: ``0`` and ``"0"`` included."""
    return value is None or value is False or value == 0 or value in ("", "0") or (
        isinstance(value, (list, tuple, dict)) and not value
    )


def as_flag(value: Any) -> bool | None:
    """Return the boolean meaning of a persisted ``"yes"``/``"no"`` flag."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    return bool(value)


def flag_to_string(value: Any) -> str:
    return "yes" if as_flag(value) else "no"


def resolve_options(field: FieldSchema, pages: PageLister | None = None) -> dict[str, Any]:
    """Return the option mapping of *field*, expanding ``%pages%``."""
    if field.uses_pages:
        options: dict[str, Any] = {"0": NONE_LABEL}
        if pages is not None:
            for page in pages.list_pages():
                options[str(page.id)] = page.title
        return options
    if isinstance(field.options, Mapping):
        return dict(field.options)
    return {}


# ---------------------------------------------------------------------------
# per-type codecs
# ---------------------------------------------------------------------------


class FieldCodec(Protocol):
    """Coerce a raw submitted value for one field type."""

    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> Any:
        ...


class TextCodec:
    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> Any:
        return clean(raw)


class CheckboxCodec:
    """Map any submission to the persisted ``"yes"``/``"no"`` sentinels."""

    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> str:
        return "yes" if raw in ("1", "yes") else "no"


class TextareaCodec:
    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> str:
        text = "" if raw is None else str(raw)
        return kses_post(text.strip())


class MultiselectCodec:
    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> list[Any]:
        if raw is None:
            items: list[Any] = []
        elif isinstance(raw, Mapping):
            items = list(raw.values())
        elif isinstance(raw, (list, tuple)):
            items = list(raw)
        else:
            items = [raw]
        cleaned = (clean(item) for item in items)
        return [item for item in cleaned if not is_empty(item)]


class SelectCodec:
    """Accept only declared keys, falling back to the default or first key."""

    def sanitize(self, raw: Any, field: FieldSchema, pages: PageLister | None) -> Any:
        allowed = list(resolve_options(field, pages))
        if is_empty(field.default) and not allowed:
            return None
        fallback = allowed[0] if is_empty(field.default) else field.default
        if isinstance(raw, (str, int)) and not isinstance(raw, bool) and str(raw) in allowed:
            return raw
        return fallback


CODEC_REGISTRY: dict[str, FieldCodec] = {
    "checkbox": CheckboxCodec(),
    "textarea": TextareaCodec(),
    "multiselect": MultiselectCodec(),
    "select": SelectCodec(),
}

DEFAULT_CODEC: FieldCodec = TextCodec()


# ---------------------------------------------------------------------------
# callbacks
# ---------------------------------------------------------------------------

SanitizeCallback = Callable[[Any, FieldSchema], Any]


class CallbackRegistry:
    """Named sanitize callbacks referenced by :attr:`FieldSchema.callback`."""

    def __init__(self) -> None:
        self._callbacks: dict[str, SanitizeCallback] = {}

    def register(self, name: str, callback: SanitizeCallback | None = None):
        """Register *callback* under *name*; usable as a decorator."""
        if callback is None:
            def deco(fn: SanitizeCallback) -> SanitizeCallback:
                self._callbacks[name] = fn
                return fn

            return deco
        self._callbacks[name] = callback
        return callback

    def get(self, name: str) -> SanitizeCallback | None:
        return self._callbacks.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._callbacks


# ---------------------------------------------------------------------------
# codec
# ---------------------------------------------------------------------------


class ValueCodec:
    def __init__(
        self,
        *,
        callbacks: CallbackRegistry | None = None,
        hooks: Hooks | None = None,
        pages: PageLister | None = None,
        registry: Mapping[str, FieldCodec] | None = None,
    ) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackRegistry()
        self.hooks = hooks if hooks is not None else Hooks()
        self.pages = pages
        self._registry = dict(CODEC_REGISTRY if registry is None else registry)

    def codec_for(self, type_name: str) -> FieldCodec:
        return self._registry.get(type_name, DEFAULT_CODEC)

    def sanitize(self, field: FieldSchema, raw: Any) -> Any:
        value = self.codec_for(field.type).sanitize(raw, field, self.pages)

        if field.callback:
            callback = self.callbacks.get(field.callback)
            if callback is None:
                logger.debug("no sanitize callback registered as %r for %s", field.callback, field.id)
            else:
                result = callback(value, field)
                if result is not None:
                    value = result

        container = resolve(field.id).container
        value = self.hooks.apply_filters(SANITIZE_FILTER, value, field, raw)
        return self.hooks.apply_filters(f"{SANITIZE_FILTER}_{container}", value, field, raw)


__all__ = [
    "NONE_LABEL",
    "SANITIZE_FILTER",
    "is_empty",
    "as_flag",
    "flag_to_string",
    "resolve_options",
    "FieldCodec",
    "CODEC_REGISTRY",
    "CallbackRegistry",
    "ValueCodec",
]
