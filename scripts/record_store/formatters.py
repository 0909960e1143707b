"""Text encoders for record data (JSON and YAML)."""

from __future__ import annotations

import json
from typing import Any

import yaml


class JsonFormatter:
    default_file_extension = ".json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def encode(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, ensure_ascii=False, sort_keys=False) + "\n"

    def decode(self, text: str) -> Any:
        return json.loads(text)


class _FlowDict(dict):
    pass


class _FlowList(list):
    pass


class _Dumper(yaml.SafeDumper):
    pass


_Dumper.add_representer(
    _FlowDict,
    lambda dumper, data: dumper.represent_mapping("tag:yaml.org,2002:map", data, flow_style=True),
)
_Dumper.add_representer(
    _FlowList,
    lambda dumper, data: dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True),
)


def _inline_from(data: Any, inline: int, depth: int = 0) -> Any:
    """Mark containers nested at ``inline`` levels or deeper for flow style."""
    if isinstance(data, dict):
        items = {k: _inline_from(v, inline, depth + 1) for k, v in data.items()}
        return _FlowDict(items) if depth >= inline else items
    if isinstance(data, (list, tuple)):
        items = [_inline_from(v, inline, depth + 1) for v in data]
        return _FlowList(items) if depth >= inline else items
    return data


class YamlFormatter:
    """YAML encoder; ``inline`` is the nesting level where flow style starts."""

    default_file_extension = ".yaml"

    def __init__(self, inline: int = 5, indent: int = 2) -> None:
        self.inline = inline
        self.indent = indent

    def encode(self, data: Any) -> str:
        return yaml.dump(
            _inline_from(data, self.inline),
            Dumper=_Dumper,
            indent=self.indent,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def decode(self, text: str) -> Any:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(str(exc)) from exc
        return {} if data is None else data


def formatter_for(path) -> JsonFormatter | YamlFormatter:
    """Pick a formatter from a file name suffix."""
    suffix = str(path).rsplit(".", 1)[-1].lower()
    if suffix in ("yaml", "yml"):
        return YamlFormatter()
    return JsonFormatter()
