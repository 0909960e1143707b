"""Tests for Record and RecordDirectory – properties, save/delete, layouts."""

import pytest

from record_store import (
    Blueprint,
    FsStorage,
    JsonFormatter,
    Record,
    RecordDirectory,
    StorageError,
    StorageLayout,
    ValidationError,
    YamlFormatter,
)


def _make_directory(tmp_path, layout=StorageLayout.FILE, formatter=None, **kwargs):
    return RecordDirectory(FsStorage(tmp_path / "records", layout=layout, formatter=formatter), **kwargs)


class RedactingRecord(Record):
    record_type = "redacting"

    def prepare_storage(self):
        elements = super().prepare_storage()
        elements.pop("secret", None)
        return elements


# ---------------------------------------------------------------------------
# Property access
# ---------------------------------------------------------------------------

class TestProperties:
    def test_direct_properties(self, tmp_path):
        record = _make_directory(tmp_path).create_record({"a": 1}, "k")
        assert record.get_property("a") == 1
        assert record.get_property("missing", "d") == "d"
        record.set_property("b", 2)
        record.unset_property("a")
        assert record.elements == {"b": 2}

    def test_def_property(self, tmp_path):
        record = _make_directory(tmp_path).create_record({"a": 1}, "k")
        record.def_property("a", 5)
        record.def_property("c", 3)
        assert record.elements == {"a": 1, "c": 3}

    def test_dotted_name_is_literal_for_direct_access(self, tmp_path):
        record = _make_directory(tmp_path).create_record({}, "k")
        record.set_property("access.site", True)
        assert record.elements == {"access.site": True}
        assert record.get_nested_property("access.site") is None

    def test_nested_properties(self, tmp_path):
        record = _make_directory(tmp_path).create_record({}, "k")
        record.set_nested_property("a.b.c", 1)
        record.def_nested_property("a.b.d", 2)
        record.def_nested_property("a.b.c", 9)
        assert record.get_nested_property("a.b") == {"c": 1, "d": 2}
        record.unset_nested_property("a.b.c")
        assert record.get_nested_property("a.b.c", "gone") == "gone"

    def test_record_owns_its_elements(self, tmp_path):
        source = {"a": {"b": 1}}
        record = _make_directory(tmp_path).create_record(source, "k")
        source["a"]["b"] = 2
        record.elements["a"]["b"] = 3
        assert record.get_nested_property("a.b") == 1

    def test_validate_on_creation(self, tmp_path):
        blueprint = Blueprint({"fields": {"email": {"type": "email", "validate": {"required": True}}}})
        directory = _make_directory(tmp_path, blueprint=blueprint)
        with pytest.raises(ValidationError):
            directory.create_record({}, "k", validate=True)
        assert directory.create_record({"email": "a@b.co"}, "k", validate=True).exists() is False


# ---------------------------------------------------------------------------
# Persistence across layouts and formats
# ---------------------------------------------------------------------------

STORAGES = [
    (StorageLayout.FILE, JsonFormatter()),
    (StorageLayout.FILE, YamlFormatter()),
    (StorageLayout.FOLDER, JsonFormatter()),
    (StorageLayout.FOLDER, YamlFormatter()),
]


class TestPersistence:
    @pytest.mark.parametrize("layout,formatter", STORAGES)
    def test_save_and_load(self, tmp_path, layout, formatter):
        directory = _make_directory(tmp_path, layout, formatter)
        record = directory.create_record({"name": "alpha", "tags": ["x"], "nested": {"a": 1}}, "alpha")
        assert record.exists() is False
        record.save()
        assert record.exists() is True
        loaded = directory.load_record("alpha")
        assert loaded.elements == record.elements
        assert loaded.get_storage().timestamp > 0
        assert directory.keys() == ["alpha"]

    @pytest.mark.parametrize("layout,formatter", STORAGES)
    def test_delete(self, tmp_path, layout, formatter):
        directory = _make_directory(tmp_path, layout, formatter)
        record = directory.create_record({"name": "alpha"}, "alpha").save()
        assert record.delete() is True
        assert record.exists() is False
        assert record.delete() is False
        assert directory.load_record("alpha") is None

    def test_delete_never_saved_is_noop(self, tmp_path):
        record = _make_directory(tmp_path).create_record({}, "new")
        assert record.delete() is False

    def test_save_updates_timestamp(self, tmp_path):
        record = _make_directory(tmp_path).create_record({}, "k")
        assert record.get_storage().timestamp == 0
        record.save()
        assert record.get_storage().timestamp > 0

    def test_save_without_key_raises(self, tmp_path):
        record = _make_directory(tmp_path).create_record({"a": 1}, "")
        with pytest.raises(StorageError):
            record.save()

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "records"
        blocker.write_text("not a directory")
        record = _make_directory(tmp_path).create_record({"a": 1}, "k")
        with pytest.raises(StorageError):
            record.save()

    def test_elements_stay_source_of_truth(self, tmp_path):
        directory = _make_directory(tmp_path)
        record = directory.create_record({}, "k")
        record.set_nested_property("a.b", [1, 2])
        record.save()
        assert directory.load_record("k").elements == record.elements

    def test_prepare_storage_redacts(self, tmp_path):
        directory = _make_directory(tmp_path, record_class=RedactingRecord)
        record = directory.create_record({"public": 1, "secret": "x"}, "k").save()
        assert record.get_property("secret") == "x"
        assert directory.load_record("k").elements == {"public": 1}

    def test_corrupt_record_raises_on_load(self, tmp_path):
        directory = _make_directory(tmp_path)
        directory.create_record({"a": 1}, "good").save()
        (tmp_path / "records" / "bad.json").write_text("{not json")
        with pytest.raises(StorageError):
            directory.load_record("bad")
        assert [r.key for r in directory.iter_records()] == ["good"]


# ---------------------------------------------------------------------------
# Storage backend
# ---------------------------------------------------------------------------

class TestFsStorage:
    @pytest.mark.parametrize("key", ["a/b", "..", ".", ""])
    def test_invalid_keys(self, tmp_path, key):
        storage = FsStorage(tmp_path)
        assert storage.exists(key) is False
        with pytest.raises(StorageError):
            storage.path_for(key)

    def test_folder_layout_paths(self, tmp_path):
        storage = FsStorage(tmp_path, layout=StorageLayout.FOLDER, formatter=YamlFormatter(), record_file="user")
        assert storage.path_for("bob") == tmp_path / "bob" / "user.yaml"
        assert storage.folder_for("bob") == tmp_path / "bob"

    def test_raw_returns_stored_text(self, tmp_path):
        storage = FsStorage(tmp_path)
        storage.write("k", {"a": 1})
        assert '"a": 1' in storage.raw("k")
        assert storage.raw("missing") == ""

    def test_non_mapping_content_raises(self, tmp_path):
        storage = FsStorage(tmp_path)
        (tmp_path / "k.json").write_text("[1, 2]")
        with pytest.raises(StorageError):
            storage.read("k")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestSerialize:
    def test_serialize(self, tmp_path):
        record = _make_directory(tmp_path).create_record({"a": 1}, "k")
        snapshot = record.serialize()
        assert snapshot.type == "record"
        assert snapshot.key == "k"
        assert snapshot.elements == {"a": 1}
        assert snapshot.storage.storage_key == "k"
