"""Keyed, persistable record wrapping a nested property tree."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from store_utils.log import store_log

from .blueprint import Blueprint
from .exceptions import StorageError
from .media import MediaCapability
from .nested import NestedPropertyStore
from .snapshot import RecordSnapshot, StorageDescriptor

if TYPE_CHECKING:
    from .directory import RecordDirectory

T = TypeVar("T", bound="Record")


class Record:
    """A persistable entity: key + elements + storage binding.

    The record owns its ``elements`` tree. ``storage`` is a descriptor of
    where the directory persists it; the backend itself belongs to the
    directory.
    """

    record_type: ClassVar[str] = "record"

    def __init__(self, elements: dict, key: str, directory: RecordDirectory, validate: bool = False) -> None:
        self._directory = directory
        self._key = key
        self._elements = NestedPropertyStore(copy.deepcopy(dict(elements)))
        self._storage = StorageDescriptor(key=key, storage_key=directory.get_storage_key(key))
        self._media: MediaCapability | None = None
        if validate:
            self.get_blueprint().validate(self._elements.data)

    # -- Identity / bindings --

    @property
    def key(self) -> str:
        return self._key

    def get_key(self) -> str:
        return self._key

    @property
    def directory(self) -> RecordDirectory:
        return self._directory

    @property
    def elements(self) -> dict:
        """A copy of the element tree."""
        return self._elements.to_dict()

    def set_elements(self, elements: dict) -> None:
        self._elements = NestedPropertyStore(copy.deepcopy(dict(elements)))

    def jsonable(self) -> dict:
        return self._elements.to_dict()

    def get_storage(self) -> StorageDescriptor:
        return self._storage

    def set_storage(self, storage: StorageDescriptor | dict) -> None:
        if isinstance(storage, dict):
            storage = StorageDescriptor.model_validate(storage)
        self._storage = storage
        self._media = None

    def get_blueprint(self) -> Blueprint:
        return self._directory.blueprint

    @property
    def media(self) -> MediaCapability | None:
        if self._media is None:
            self._media = self._directory.media_for(self._storage.storage_key)
        return self._media

    # -- Direct properties --

    def get_property(self, name: str, default: Any = None) -> Any:
        value = self._elements.data.get(name)
        return default if value is None else value

    def has_property(self, name: str) -> bool:
        return self._elements.data.get(name) is not None

    def set_property(self, name: str, value: Any) -> None:
        self._elements.data[name] = value

    def unset_property(self, name: str) -> None:
        self._elements.data.pop(name, None)

    def def_property(self, name: str, default: Any) -> None:
        if not self.has_property(name):
            self.set_property(name, default)

    # -- Nested properties --

    def get_nested_property(self, path: str, default: Any = None, separator: str | None = None) -> Any:
        return self._elements.get(path, default, separator)

    def set_nested_property(self, path: str, value: Any, separator: str | None = None) -> None:
        self._elements.set(path, value, separator)

    def unset_nested_property(self, path: str, separator: str | None = None) -> None:
        self._elements.unset(path, separator)

    def def_nested_property(self, path: str, default: Any, separator: str | None = None) -> None:
        self._elements.def_(path, default, separator)

    # -- Persistence --

    def exists(self) -> bool:
        storage_key = self._storage.storage_key
        return bool(storage_key) and self._directory.storage.exists(storage_key)

    def prepare_storage(self) -> dict:
        """Elements as they should be written; subclasses redact here."""
        return self.jsonable()

    def save(self: T) -> T:
        storage_key = self._storage.storage_key
        if not storage_key:
            raise StorageError(f"Cannot save {self.record_type} record {self._key!r}: no storage key bound")
        timestamp = self._directory.storage.write(storage_key, self.prepare_storage())
        self._storage = self._storage.model_copy(update={"timestamp": timestamp})
        store_log(f"Saved {self.record_type} record {self._key!r}")
        return self

    def delete(self) -> bool:
        """Remove the persisted record. Returns False if it was never stored."""
        if not self.exists():
            return False
        self._directory.storage.delete(self._storage.storage_key)
        store_log(f"Deleted {self.record_type} record {self._key!r}")
        return True

    # -- Serialization --

    def serialize(self) -> RecordSnapshot:
        return RecordSnapshot(
            type=self.record_type,
            key=self._key,
            elements=self.jsonable(),
            storage=self._storage,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self._key!r}, exists={self.exists()})"
