from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

import yaml

from ..errors import SettingsLoadError
from . import register_backend
from .base import BaseBackend


@register_backend
class YamlBackend(BaseBackend):
    """YAML file backend."""

    suffixes = (".yaml", ".yml")

    def load(self, path: Path) -> MutableMapping[str, Any]:
        path = Path(path)
        if not path.exists():
            return {}
        raw = path.read_text(encoding="utf-8")
        if raw.strip() == "":
            return {}
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise SettingsLoadError(str(exc)) from exc
        if not isinstance(data, dict):
            raise SettingsLoadError("Root of YAML options must be a mapping")
        return data

    def save(self, path: Path, data: Mapping[str, Any]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(dict(data), fh, sort_keys=True, allow_unicode=True)
        tmp.replace(path)
