from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from .codec import ValueCodec, as_flag
from .keys import OptionAddress, option_key, resolve
from .sanitize import unslash
from .schema import LAYOUT_TYPES, FieldSchema, coerce_field
from .store import OptionStore

logger = logging.getLogger(__name__)

SaveStatus = Literal["ok", "skipped"]


class SettingsEngine:
    """Translate between field schemas, submitted payloads and stored options."""

    def __init__(self, store: OptionStore, codec: ValueCodec | None = None) -> None:
        self.store = store
        self.codec = codec if codec is not None else ValueCodec()

    # ----- save -----

    def save_fields(
        self,
        fields: Iterable[FieldSchema | Mapping[str, Any]],
        payload: Mapping[str, Any] | None,
    ) -> SaveStatus:
        """Sanitize the values of *fields* found in *payload* and store them.

        Values of addressed fields (``group[member]``) are merged into the
        stored mapping of their container; every container is read at most
        once and written once at the end of the pass.
        """
        if not payload:
            return "skipped"

        staging: dict[str, Any] = {}
        for entry in fields:
            field = coerce_field(entry)
            if field is None:
                logger.debug("skipping malformed field descriptor %r", entry)
                continue
            if field.transient or field.type in LAYOUT_TYPES:
                continue

            address = resolve(field.id)
            raw = unslash(self._raw_value(payload, address))
            value = self.codec.sanitize(field, raw)
            if value is None:
                logger.debug("nothing to store for %s", field.id)
                continue

            if address.member is None:
                staging[address.container] = value
                continue
            if address.container not in staging:
                staging[address.container] = self.store.get(option_key(address.container), {})
            if not isinstance(staging[address.container], dict):
                staging[address.container] = {}
            staging[address.container][address.member] = value

        for container, value in staging.items():
            self.store.set(option_key(container), value)
        logger.info("saved %d option(s): %s", len(staging), ", ".join(staging))
        return "ok"

    @staticmethod
    def _raw_value(payload: Mapping[str, Any], address: OptionAddress) -> Any:
        raw = payload.get(address.container)
        if address.member is None:
            return raw
        if isinstance(raw, Mapping):
            return raw.get(address.member)
        return None

    # ----- read -----

    def get_option(self, field_id: str, default: Any = "") -> Any:
        """Return the stored value for *field_id* or *default* when absent.

        Empty strings, ``0`` and ``False`` are returned as stored; persisted
        ``"yes"``/``"no"`` flags are not converted (see :meth:`get_flag`).
        """
        address = resolve(field_id)
        if address.member is None:
            value = self.store.get(option_key(address.container), None)
        else:
            stored = self.store.get(option_key(address.container), None)
            value = stored.get(address.member) if isinstance(stored, Mapping) else None
        if value is None:
            return default
        return value

    def get_flag(self, field_id: str, default: bool | None = None) -> bool | None:
        """Return a checkbox option as a boolean."""
        value = self.get_option(field_id, None)
        if value is None:
            return default
        return as_flag(value)


__all__ = ["SaveStatus", "SettingsEngine"]
