"""Tests for record snapshots and rehydration through the directory registry."""

import pytest

from record_store import (
    ConfigurationError,
    DirectoryRegistry,
    FsStorage,
    RecordDirectory,
    RecordSnapshot,
    rehydrate,
)


@pytest.fixture
def directory(tmp_path):
    return RecordDirectory(FsStorage(tmp_path / "records"))


@pytest.fixture
def registry(directory):
    registry = DirectoryRegistry()
    registry.register(directory)
    return registry


class TestRehydrate:
    def test_round_trip_rebinds_to_live_directory(self, directory, registry):
        record = directory.create_record({"a": {"b": 1}}, "k").save()
        restored = rehydrate(record.serialize(), registry)
        assert restored.directory is directory
        assert restored.key == "k"
        assert restored.elements == {"a": {"b": 1}}
        assert restored.get_storage() == record.get_storage()
        assert restored.exists() is True

    def test_accepts_plain_mapping(self, registry):
        restored = rehydrate({"type": "record", "key": "k", "elements": {"a": 1}}, registry)
        assert restored.get_property("a") == 1
        assert restored.get_storage().storage_key == "k"

    def test_unknown_type_raises(self, registry):
        with pytest.raises(ConfigurationError):
            rehydrate({"type": "pages", "key": "k"}, registry)

    def test_empty_registry_raises(self, directory):
        snapshot = directory.create_record({}, "k").serialize()
        with pytest.raises(ConfigurationError):
            rehydrate(snapshot, DirectoryRegistry())


class TestLegacySnapshot:
    def test_key_derived_from_username(self):
        snapshot = RecordSnapshot.from_legacy("users", {"username": "Alice", "email": "a@b.co"})
        assert snapshot.key == "alice"
        assert snapshot.storage.storage_key == "alice"
        assert snapshot.storage.timestamp == 0

    def test_missing_username_gives_empty_key(self):
        snapshot = RecordSnapshot.from_legacy("users", {"email": "a@b.co"})
        assert snapshot.key == ""
