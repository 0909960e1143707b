"""Runtime configuration store with dotted-path lookups."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from record_store import NestedPropertyStore, formatter_for


class ConfigStore:
    """Nested configuration (``groups.*``, ``system.security.*`` …) addressed by dot paths."""

    def __init__(self, data: dict | None = None) -> None:
        self._items = NestedPropertyStore(copy.deepcopy(dict(data or {})))

    @classmethod
    def from_file(cls, path: str | Path) -> ConfigStore:
        """Load YAML or JSON configuration; a missing file yields an empty store."""
        p = Path(path)
        if not p.exists():
            return cls()
        data = formatter_for(p).decode(p.read_text(encoding="utf-8"))
        return cls(data if isinstance(data, dict) else {})

    def get(self, path: str, default: Any = None) -> Any:
        return self._items.get(path, default)

    def set(self, path: str, value: Any) -> None:
        self._items.set(path, value)

    def to_dict(self) -> dict:
        return self._items.to_dict()
