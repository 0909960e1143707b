"""Minimal serialized form of a record and its rehydration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from store_utils.log import store_log

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .record import Record
    from .registry import DirectoryRegistry


class StorageDescriptor(BaseModel):
    """Where a record lives in its directory's storage."""

    model_config = ConfigDict(frozen=True)

    key: str = ""
    storage_key: str = ""
    timestamp: int = 0


class RecordSnapshot(BaseModel):
    """``{type, key, elements, storage}``: everything needed to rebuild a record."""

    type: str
    key: str = ""
    elements: dict[str, Any] = Field(default_factory=dict)
    storage: StorageDescriptor | None = None

    @classmethod
    def from_legacy(cls, record_type: str, elements: dict, key_field: str = "username") -> RecordSnapshot:
        """Build a snapshot from bare elements (older serialized form)."""
        key = str(elements.get(key_field) or "").lower()
        return cls(
            type=record_type,
            key=key,
            elements=elements,
            storage=StorageDescriptor(key=key, storage_key=key, timestamp=0),
        )


def rehydrate(snapshot: RecordSnapshot | dict, registry: DirectoryRegistry) -> Record:
    """Rebuild a record from a snapshot, bound to the live directory for its type."""
    if isinstance(snapshot, dict):
        snapshot = RecordSnapshot.model_validate(snapshot)
    directory = registry.get(snapshot.type)
    if directory is None:
        raise ConfigurationError(f"No directory registered for record type {snapshot.type!r}")
    record = directory.create_record(snapshot.elements, snapshot.key)
    if snapshot.storage is not None:
        record.set_storage(snapshot.storage)
    store_log(f"Rehydrated {snapshot.type} record {snapshot.key!r}")
    return record
