"""Named extension points.

Actions are fire-and-forget notifications; filters thread a value through
every registered callback in registration order.  A :class:`Hooks` instance is
passed explicitly to the components that expose extension points.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any


class Hooks:
    def __init__(self) -> None:
        self._actions: defaultdict[str, list[Callable[..., Any]]] = defaultdict(list)
        self._filters: defaultdict[str, list[Callable[..., Any]]] = defaultdict(list)

    # ----- actions -----

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        """Register *callback* to be called when *event* is emitted."""
        self._actions[event].append(callback)

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        for callback in list(self._actions.get(event, [])):
            callback(*args, **kwargs)

    # ----- filters -----

    def add_filter(self, name: str, callback: Callable[..., Any]) -> None:
        """Register *callback* as ``callback(value, *args) -> value`` for *name*."""
        self._filters[name].append(callback)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for callback in list(self._filters.get(name, [])):
            value = callback(value, *args)
        return value

    def has(self, name: str) -> bool:
        return bool(self._actions.get(name) or self._filters.get(name))

    def clear(self) -> None:
        self._actions.clear()
        self._filters.clear()


__all__ = ["Hooks"]
