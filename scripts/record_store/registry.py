"""Record type to directory registry used when rebinding records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .directory import RecordDirectory


class DirectoryRegistry:
    def __init__(self) -> None:
        self._directories: dict[str, "RecordDirectory"] = {}

    def register(self, directory: "RecordDirectory") -> None:
        if directory.record_type:
            self._directories[directory.record_type] = directory

    def get(self, record_type: str) -> "RecordDirectory" | None:
        return self._directories.get(record_type)

    def items(self) -> dict[str, "RecordDirectory"]:
        return dict(self._directories)
