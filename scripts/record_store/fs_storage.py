"""Filesystem storage backend for records."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .exceptions import StorageError
from .formatters import JsonFormatter, YamlFormatter
from .storage_layout import StorageLayout


class FsStorage:
    """Read and write record elements as formatted text files.

    * ``FILE``   – ``<root>/<key><ext>``
    * ``FOLDER`` – ``<root>/<key>/<record_file><ext>``
    """

    def __init__(
        self,
        root: Path | str,
        layout: StorageLayout = StorageLayout.FILE,
        formatter: JsonFormatter | YamlFormatter | None = None,
        record_file: str = "record",
    ) -> None:
        self.root = Path(root)
        self.layout = layout
        self.formatter = formatter or JsonFormatter()
        self.record_file = record_file

    @property
    def extension(self) -> str:
        return self.formatter.default_file_extension

    def path_for(self, storage_key: str) -> Path:
        if not storage_key or os.sep in storage_key or "/" in storage_key or storage_key in (".", ".."):
            raise StorageError(f"Invalid storage key: {storage_key!r}")
        if self.layout == StorageLayout.FOLDER:
            return self.root / storage_key / f"{self.record_file}{self.extension}"
        return self.root / f"{storage_key}{self.extension}"

    def folder_for(self, storage_key: str) -> Path:
        """Directory that holds per-record files (media)."""
        if self.layout == StorageLayout.FOLDER:
            return self.path_for(storage_key).parent
        return self.root / storage_key

    def exists(self, storage_key: str) -> bool:
        try:
            return self.path_for(storage_key).is_file()
        except StorageError:
            return False

    def raw(self, storage_key: str) -> str:
        path = self.path_for(storage_key)
        if not path.exists():
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {path}: {exc}") from exc

    def read(self, storage_key: str) -> dict | None:
        text = self.raw(storage_key)
        if not text:
            return None
        try:
            data = self.formatter.decode(text)
        except ValueError as exc:
            raise StorageError(f"Cannot decode {self.path_for(storage_key)}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path_for(storage_key)} does not hold a mapping")
        return data

    def write(self, storage_key: str, data: dict) -> int:
        """Write ``data`` and return the file modification timestamp."""
        path = self.path_for(storage_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(path.name + ".tmp")
            tmp.write_text(self.formatter.encode(data), encoding="utf-8")
            tmp.replace(path)
            return int(path.stat().st_mtime)
        except OSError as exc:
            raise StorageError(f"Cannot write {path}: {exc}") from exc

    def delete(self, storage_key: str) -> bool:
        path = self.path_for(storage_key)
        if not path.exists():
            return False
        try:
            if self.layout == StorageLayout.FOLDER:
                shutil.rmtree(path.parent)
            else:
                path.unlink()
        except OSError as exc:
            raise StorageError(f"Cannot delete {path}: {exc}") from exc
        return True

    def keys(self) -> list[str]:
        """Storage keys of every persisted record, sorted."""
        if not self.root.is_dir():
            return []
        if self.layout == StorageLayout.FOLDER:
            return sorted(
                entry.name
                for entry in self.root.iterdir()
                if entry.is_dir() and (entry / f"{self.record_file}{self.extension}").is_file()
            )
        return sorted(fp.name[: -len(self.extension)] for fp in self.root.glob(f"*{self.extension}") if fp.is_file())
