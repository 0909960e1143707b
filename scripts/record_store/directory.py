"""Factory and lookup for records of one type."""

from __future__ import annotations

from pathlib import Path

from store_utils.log import store_log

from .blueprint import Blueprint
from .exceptions import StorageError
from .fs_storage import FsStorage
from .media import MediaCapability
from .record import Record


class RecordDirectory:
    """Creates and loads records of a single type from one storage backend."""

    record_class: type[Record] = Record

    def __init__(
        self,
        storage: FsStorage,
        blueprint: Blueprint | None = None,
        record_class: type[Record] | None = None,
        media_root: Path | str | None = None,
        media_base_url: str = "",
    ) -> None:
        if record_class is not None:
            self.record_class = record_class
        self.storage = storage
        self.blueprint = blueprint or Blueprint()
        self.media_root = Path(media_root) if media_root is not None else None
        self.media_base_url = media_base_url

    @property
    def record_type(self) -> str:
        return self.record_class.record_type

    def get_storage_key(self, key: str) -> str:
        return key

    def create_record(self, elements: dict, key: str = "", validate: bool = False) -> Record:
        return self.record_class(elements, key, self, validate=validate)

    def load_record(self, key: str) -> Record | None:
        """Load a persisted record or return None if it does not exist."""
        storage_key = self.get_storage_key(key)
        if not storage_key or not self.storage.exists(storage_key):
            return None
        data = self.storage.read(storage_key)
        if data is None:
            return None
        record = self.create_record(data, key)
        record.set_storage(record.get_storage().model_copy(update={"timestamp": self._timestamp(storage_key)}))
        return record

    def keys(self) -> list[str]:
        return self.storage.keys()

    def iter_records(self):
        """Yield every readable record; unreadable ones are logged and skipped."""
        for key in self.keys():
            try:
                record = self.load_record(key)
            except StorageError as exc:
                store_log(f"Skipping {self.record_type} record {key!r}: {exc}")
                continue
            if record is not None:
                yield record

    def media_for(self, storage_key: str) -> MediaCapability | None:
        if not storage_key:
            return None
        if self.media_root is not None:
            folder = self.media_root / storage_key
        else:
            folder = self.storage.folder_for(storage_key)
        base_url = f"{self.media_base_url.rstrip('/')}/{storage_key}"
        return MediaCapability(folder, base_url)

    def _timestamp(self, storage_key: str) -> int:
        try:
            return int(self.storage.path_for(storage_key).stat().st_mtime)
        except OSError:
            return 0
