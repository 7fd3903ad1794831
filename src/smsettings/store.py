"""Option storage.

The settings core talks to storage through the :class:`OptionStore` protocol:
a flat namespace of option names holding scalars, lists or nested mappings.
:class:`MemoryOptionStore` keeps everything in a dict while
:class:`FileOptionStore` persists the namespace to a JSON or YAML file using
the backend registered for the file suffix.
"""

from __future__ import annotations

import copy
import fnmatch
import logging
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from threading import RLock
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_MISSING = object()


def _backend_for(path: Path):
    from .backends import get_backend_for_path

    return get_backend_for_path(path)


def _plain(value: Any) -> Any:
    """Return a detached copy of *value* built from dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class OptionStore(Protocol):
    """Key/value option storage used by :class:`~smsettings.engine.SettingsEngine`."""

    def get(self, key: str, fallback: Any = None) -> Any:
        """Return the stored value or *fallback* when missing."""

    def set(self, key: str, value: Any) -> bool:
        """Store *value*; return ``False`` when nothing changed."""

    def delete(self, key: str) -> bool:
        """Remove *key*; return ``True`` if it existed."""

    def keys(self) -> list[str]:
        """Return all stored option names."""


def delete_matching(store: OptionStore, patterns: Iterable[str]) -> list[str]:
    """Delete every option whose name matches one of the glob *patterns*."""
    patterns = list(patterns)
    doomed = [k for k in store.keys() if any(fnmatch.fnmatchcase(k, p) for p in patterns)]
    for key in doomed:
        store.delete(key)
    return doomed


class MemoryOptionStore:
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: MutableMapping[str, Any] = _plain(data or {})

    def get(self, key: str, fallback: Any = None) -> Any:
        if key not in self._data:
            return fallback
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        value = _plain(value)
        if key in self._data and self._data[key] == value:
            return False
        self._data[key] = value
        return True

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def keys(self) -> list[str]:
        return sorted(self._data)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self._data))


class FileOptionStore(MemoryOptionStore):
    """Options persisted to a single JSON or YAML file.

    The file is read once on construction (and on :meth:`reload`) and
    rewritten atomically after every change.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._backend = _backend_for(self.path)
        self._lock = RLock()
        super().__init__()
        self.reload()

    def reload(self) -> None:
        with self._lock:
            self._data = _plain(self._backend.load(self.path))

    def _flush(self) -> None:
        self._backend.save(self.path, self._data)
        logger.debug("wrote %d options to %s", len(self._data), self.path)

    def get(self, key: str, fallback: Any = None) -> Any:
        with self._lock:
            return super().get(key, fallback)

    def set(self, key: str, value: Any) -> bool:
        with self._lock:
            previous = self._data.get(key, _MISSING)
            changed = super().set(key, value)
            if changed:
                self._flush_or_restore(key, previous)
            return changed

    def delete(self, key: str) -> bool:
        with self._lock:
            previous = self._data.get(key, _MISSING)
            if not super().delete(key):
                return False
            self._flush_or_restore(key, previous)
            return True

    def _flush_or_restore(self, key: str, previous: Any) -> None:
        # Memory must keep matching the file when the write fails.
        try:
            self._flush()
        except Exception:
            if previous is _MISSING:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise


__all__ = ["OptionStore", "MemoryOptionStore", "FileOptionStore", "delete_matching"]
