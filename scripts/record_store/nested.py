"""Dot-path addressable tree over plain nested dicts.

Branches are ``dict`` instances; every other value is a leaf. Paths are
split on a separator (``.`` by default) and resolved one segment at a time.
"""

from __future__ import annotations

import copy
from typing import Any, Iterator

from .exceptions import PathConflict

DEFAULT_SEPARATOR = "."


def split_path(path: str, separator: str | None = None) -> list[str]:
    if not path:
        return []
    return str(path).split(separator or DEFAULT_SEPARATOR)


class NestedPropertyStore:
    """Key-value tree addressed by separator-delimited paths."""

    def __init__(self, data: dict | None = None) -> None:
        self._data: dict = data if data is not None else {}

    @property
    def data(self) -> dict:
        """The live root mapping (not a copy)."""
        return self._data

    def get(self, path: str, default: Any = None, separator: str | None = None) -> Any:
        """Return the value at ``path`` or ``default`` if any segment is missing."""
        segments = split_path(path, separator)
        if not segments:
            return default
        current: Any = self._data
        for segment in segments:
            if not isinstance(current, dict) or segment not in current:
                return default
            current = current[segment]
        return current

    def has(self, path: str, separator: str | None = None) -> bool:
        missing = object()
        return self.get(path, missing, separator) is not missing

    def set(self, path: str, value: Any, separator: str | None = None) -> None:
        """Assign ``value`` at ``path``, creating intermediate mappings.

        A ``None`` intermediate is replaced by a new mapping; any other
        non-mapping intermediate raises :class:`PathConflict`.
        """
        segments = split_path(path, separator)
        if not segments:
            raise ValueError("Empty property path")
        current = self._data
        for segment in segments[:-1]:
            nxt = current.get(segment)
            if nxt is None:
                nxt = {}
                current[segment] = nxt
            elif not isinstance(nxt, dict):
                raise PathConflict(path, segment)
            current = nxt
        current[segments[-1]] = value

    def unset(self, path: str, separator: str | None = None) -> None:
        """Remove the leaf at ``path``; silently ignores missing paths."""
        segments = split_path(path, separator)
        if not segments:
            raise ValueError("Empty property path")
        current: Any = self._data
        for segment in segments[:-1]:
            if not isinstance(current, dict) or segment not in current:
                return
            current = current[segment]
        if isinstance(current, dict):
            current.pop(segments[-1], None)

    def def_(self, path: str, default: Any = None, separator: str | None = None) -> None:
        """Set ``path`` to ``default`` only when it is currently absent (or None)."""
        if self.get(path, None, separator) is None:
            self.set(path, default, separator)

    def to_dict(self) -> dict:
        return copy.deepcopy(self._data)

    def flatten(self, separator: str | None = None, prefix: str = "") -> dict[str, Any]:
        """Map every leaf path to its value. Empty mappings count as leaves."""
        sep = separator or DEFAULT_SEPARATOR
        return dict(_walk(self._data, sep, prefix))

    def __contains__(self, path: str) -> bool:
        return self.has(path)

    def __repr__(self) -> str:
        return f"NestedPropertyStore({self._data!r})"


def _walk(node: dict, separator: str, prefix: str) -> Iterator[tuple[str, Any]]:
    for key, value in node.items():
        path = f"{prefix}{separator}{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            yield from _walk(value, separator, path)
        else:
            yield path, value
