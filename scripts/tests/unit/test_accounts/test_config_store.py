"""Tests for ConfigStore loading and dotted lookups."""

from accounts import ConfigStore


class TestConfigStore:
    def test_dotted_get_and_set(self):
        config = ConfigStore({"system": {"security": {}}})
        config.set("system.security.default_hash", "$2b$...")
        assert config.get("system.security.default_hash") == "$2b$..."
        assert config.get("system.missing", "fallback") == "fallback"

    def test_from_yaml(self, tmp_path):
        fp = tmp_path / "config.yaml"
        fp.write_text("groups:\n  admin:\n    access:\n      site:\n        login: true\n")
        assert ConfigStore.from_file(fp).get("groups.admin.access.site.login") is True

    def test_from_json(self, tmp_path):
        fp = tmp_path / "config.json"
        fp.write_text('{"groups": {"editors": {"access": {"site": {"login": "yes"}}}}}')
        assert ConfigStore.from_file(fp).get("groups.editors.access.site.login") == "yes"

    def test_missing_file_gives_empty_store(self, tmp_path):
        config = ConfigStore.from_file(tmp_path / "absent.yaml")
        assert config.to_dict() == {}

    def test_to_dict_is_a_copy(self):
        config = ConfigStore({"a": {"b": 1}})
        config.to_dict()["a"]["b"] = 2
        assert config.get("a.b") == 1

    def test_set_does_not_touch_source_mapping(self):
        groups = {"admin": {"access": {"site": {"login": True}}}}
        config = ConfigStore({"groups": groups})
        config.set("groups.admin.access.site.edit", True)
        assert groups == {"admin": {"access": {"site": {"login": True}}}}
        assert config.get("groups.admin.access.site.edit") is True
