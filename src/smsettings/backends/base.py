from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any


class BaseBackend(ABC):
    """Abstract option file backend."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def load(self, path: Path) -> MutableMapping[str, Any]:
        pass

    @abstractmethod
    def save(self, path: Path, data: Mapping[str, Any]) -> None:
        pass
