"""Field descriptors for settings pages.

Pages describe their settings as plain mappings (the shape used by the
plugin's page definitions).  :class:`FieldSchema` freezes one such
mapping into an immutable descriptor with the presentation defaults filled in.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field as dataclass_field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import SettingsLoadError
from .keys import is_transient

PAGES_SENTINEL = "%pages%"

# Display-only types never carry a value.
LAYOUT_TYPES = frozenset({"title", "sectionend", "description", "separator", "separator_title"})


@dataclass(frozen=True)
class FieldSchema:
    """Specification for a single configurable setting."""

    id: str
    type: str
    default: Any = None
    options: Mapping[str, Any] | str | None = None
    callback: str | None = None
    title: str = ""
    desc: str = ""
    desc_tip: bool | str = False
    css: str = ""
    css_class: str = ""
    placeholder: str = ""
    custom_attributes: Mapping[str, Any] = dataclass_field(default_factory=dict)
    hide_if_checked: str | bool = False
    show_if_checked: str | bool = False
    value: Any = None

    def __post_init__(self) -> None:
        options = self.options
        if options is not None and not isinstance(options, str):
            object.__setattr__(self, "options", MappingProxyType(_option_mapping(options)))
        object.__setattr__(
            self, "custom_attributes", MappingProxyType(dict(self.custom_attributes or {}))
        )

    @property
    def transient(self) -> bool:
        return is_transient(self.id)

    @property
    def uses_pages(self) -> bool:
        return self.options == PAGES_SENTINEL

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> FieldSchema:
        """Build a descriptor from a page definition mapping.

        ``title`` falls back to ``name`` and ``class`` maps to
        :attr:`css_class`.  Unknown keys are ignored.
        """
        title = data.get("title")
        if title is None:
            title = data.get("name", "")
        return cls(
            id=data.get("id") or "",
            type=data["type"],
            default=data.get("default"),
            options=data.get("options"),
            callback=data.get("callback"),
            title=title,
            desc=data.get("desc") or "",
            desc_tip=data.get("desc_tip", False),
            css=data.get("css") or "",
            css_class=data.get("class") or "",
            placeholder=data.get("placeholder") or "",
            custom_attributes=data.get("custom_attributes") or {},
            hide_if_checked=data.get("hide_if_checked", False),
            show_if_checked=data.get("show_if_checked", False),
            value=data.get("value"),
        )


def _option_mapping(options: Mapping[Any, Any] | Iterable[Any]) -> dict[str, Any]:
    if isinstance(options, Mapping):
        return {str(k): v for k, v in options.items()}
    return {str(i): v for i, v in enumerate(options)}


def coerce_field(entry: FieldSchema | Mapping[str, Any], *, require_id: bool = True) -> FieldSchema | None:
    """Return *entry* as a :class:`FieldSchema` or ``None`` when malformed."""
    if isinstance(entry, FieldSchema):
        if require_id and not entry.id:
            return None
        return entry
    if not isinstance(entry, Mapping) or entry.get("type") is None:
        return None
    if require_id and entry.get("id") is None:
        return None
    return FieldSchema.from_mapping(entry)


def load_schema(path: Path) -> list[dict[str, Any]]:
    """Load a list of field mappings from a YAML or JSON file."""
    import yaml

    path = Path(path)
    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw) or []
    except yaml.YAMLError as exc:
        raise SettingsLoadError(str(exc)) from exc
    if isinstance(data, Mapping):
        data = data.get("fields", [])
    if not isinstance(data, list) or not all(isinstance(d, Mapping) for d in data):
        raise SettingsLoadError("Schema must be a list of field mappings")
    return [dict(d) for d in data]


__all__ = [
    "PAGES_SENTINEL",
    "LAYOUT_TYPES",
    "FieldSchema",
    "coerce_field",
    "load_schema",
]
