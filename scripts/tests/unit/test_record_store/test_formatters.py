"""Tests for JSON/YAML formatters."""

import pytest

from record_store import JsonFormatter, YamlFormatter
from record_store.formatters import formatter_for


class TestJsonFormatter:
    def test_encode_keeps_key_order(self):
        text = JsonFormatter().encode({"b": 1, "a": 2})
        assert text.index('"b"') < text.index('"a"')
        assert text.endswith("\n")

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            JsonFormatter().decode("{oops")


class TestYamlFormatter:
    def test_block_style_by_default(self):
        assert YamlFormatter().encode({"a": {"b": 1}}) == "a:\n  b: 1\n"

    def test_inline_level(self):
        assert YamlFormatter(inline=1).encode({"a": {"b": 1}}) == "a: {b: 1}\n"
        assert YamlFormatter(inline=1).encode({"a": [1, 2]}) == "a: [1, 2]\n"

    def test_decode(self):
        assert YamlFormatter().decode("a:\n  b: [1, 2]\n") == {"a": {"b": [1, 2]}}
        assert YamlFormatter().decode("") == {}

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            YamlFormatter().decode("a: [unclosed")


@pytest.mark.parametrize(
    "name,expected",
    [("user.yaml", YamlFormatter), ("user.YML", YamlFormatter), ("user.json", JsonFormatter), ("user", JsonFormatter)],
)
def test_formatter_for(name, expected):
    assert isinstance(formatter_for(name), expected)
