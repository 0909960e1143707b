"""Blueprint schema: field definitions, defaults, merge rules and validation.

A blueprint is built from the same nested mapping a blueprint file holds::

    form:
      fields:
        email:
          type: email
          validate:
            required: true
        access:
          type: array

Field names may contain dots (``access.site.login``); implicit sections are
created for the leading segments.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any, Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import MergeTypeError, ValidationError
from .formatters import formatter_for
from .nested import DEFAULT_SEPARATOR, split_path

MergeStrategy = Literal["deep", "replace"]

# Field types whose value is a mapping.
MAPPING_TYPES = frozenset({"section", "array", "file", "object"})

_TYPE_ADAPTERS: dict[str, TypeAdapter] = {
    "text": TypeAdapter(str),
    "textarea": TypeAdapter(str),
    "password": TypeAdapter(str),
    "email": TypeAdapter(str),
    "hidden": TypeAdapter(str),
    "int": TypeAdapter(int),
    "number": TypeAdapter(int | float),
    "bool": TypeAdapter(bool),
    "toggle": TypeAdapter(bool),
    "checkbox": TypeAdapter(bool),
    "list": TypeAdapter(list),
}
_MAPPING_ADAPTER = TypeAdapter(dict)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_EMPTY = (None, "", [], {})


class FieldRules(BaseModel):
    """The ``validate`` block of a field."""

    model_config = ConfigDict(extra="allow", frozen=True)

    required: bool = False
    type: str | None = None
    pattern: str | None = None
    min: float | None = None
    max: float | None = None


class FieldSpec(BaseModel):
    """A single blueprint field."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    type: str = "text"
    default: Any = None
    merge: MergeStrategy | None = None
    validate_: FieldRules = Field(default_factory=FieldRules, alias="validate")
    options: list[Any] | None = None
    children: dict[str, FieldSpec] = Field(default_factory=dict)

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def value_type(self) -> str:
        return self.validate_.type or self.type

    @property
    def is_mapping(self) -> bool:
        return bool(self.children) or self.value_type in MAPPING_TYPES

    @property
    def merge_strategy(self) -> MergeStrategy:
        if self.merge:
            return self.merge
        return "deep" if self.is_mapping else "replace"


def _parse_options(raw: Any) -> list[Any] | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return list(raw.keys())
    return list(raw)


def _parse_fields(raw: dict, prefix: str = "") -> dict[str, FieldSpec]:
    """Turn a ``fields`` mapping into a tree of FieldSpec nodes."""
    pending: dict[str, dict] = {}
    for dotted_name, definition in (raw or {}).items():
        definition = dict(definition or {})
        head, *rest = str(dotted_name).split(DEFAULT_SEPARATOR)
        if rest:
            # `a.b.c` becomes section `a` holding field `b.c`
            section = pending.setdefault(head, {"type": "section", "fields": {}})
            section.setdefault("fields", {})[DEFAULT_SEPARATOR.join(rest)] = definition
        elif head in pending:
            pending[head]["fields"].update(definition.pop("fields", {}) or {})
            pending[head].update(definition)
        else:
            definition.setdefault("fields", {})
            pending[head] = definition

    specs: dict[str, FieldSpec] = {}
    for name, definition in pending.items():
        path = f"{prefix}{DEFAULT_SEPARATOR}{name}" if prefix else name
        children = _parse_fields(definition.pop("fields", {}) or {}, path)
        definition.pop("name", None)
        definition["options"] = _parse_options(definition.get("options"))
        if definition.get("validate") is None:
            definition.pop("validate", None)
        specs[name] = FieldSpec(name=path, children=children, **definition)
    return specs


class Blueprint:
    """Immutable schema for one record type."""

    def __init__(self, schema: dict | None = None, name: str = "") -> None:
        schema = copy.deepcopy(schema or {})
        form = schema.get("form", schema)
        self.name = name or schema.get("title", "")
        self._fields = _parse_fields(form.get("fields", {}))

    @classmethod
    def from_file(cls, path: str | Path) -> Blueprint:
        p = Path(path)
        data = formatter_for(p).decode(p.read_text(encoding="utf-8"))
        return cls(data, name=p.stem)

    # -- Schema access --

    def fields(self) -> Iterator[FieldSpec]:
        """Iterate every field, depth first."""
        yield from _iter_fields(self._fields)

    def field(self, path: str, separator: str | None = None) -> FieldSpec | None:
        rules: dict[str, FieldSpec] = self._fields
        spec = None
        for segment in split_path(path, separator):
            spec = rules.get(segment)
            if spec is None:
                return None
            rules = spec.children
        return spec

    def _rules_at(self, path: str | None, separator: str | None) -> dict[str, FieldSpec] | None:
        if not path:
            return self._fields
        spec = self.field(path, separator)
        if spec is None or not spec.children:
            return None
        return spec.children

    # -- Defaults --

    def get_defaults(self) -> dict:
        """Nested defaults for every field that declares one."""
        return _defaults(self._fields)

    # -- Merge --

    def merge_data(self, old: Any, new: Any, path: str | None = None, separator: str | None = None) -> dict:
        """Deep-merge ``new`` into ``old`` following the field merge rules.

        Neither input is modified; a new tree is returned.
        """
        if not isinstance(old, dict) or not isinstance(new, dict):
            raise MergeTypeError(path or "", old, new)
        return _merge(old, new, self._rules_at(path, separator), path or "")

    # -- Validation --

    def validate(self, data: dict) -> None:
        """Raise :class:`ValidationError` listing every violated constraint."""
        errors: list[tuple[str, str]] = []
        if not isinstance(data, dict):
            raise ValidationError([("", "data must be a mapping")])
        _validate(self._fields, data, errors)
        if errors:
            raise ValidationError(errors)

    # -- Filtering --

    def filter(self, data: dict) -> dict:
        """Return only the declared fields of ``data``."""
        return _filter(self._fields, data)

    def extra(self, data: dict) -> dict:
        """Return only the undeclared keys of ``data`` (nested)."""
        return _extra(self._fields, data)

    def __repr__(self) -> str:
        return f"Blueprint({self.name!r}, fields={list(self._fields)})"


def _iter_fields(rules: dict[str, FieldSpec]) -> Iterator[FieldSpec]:
    for spec in rules.values():
        yield spec
        yield from _iter_fields(spec.children)


def _defaults(rules: dict[str, FieldSpec]) -> dict:
    result: dict = {}
    for key, spec in rules.items():
        if spec.has_default:
            result[key] = copy.deepcopy(spec.default)
        elif spec.children:
            nested = _defaults(spec.children)
            if nested:
                result[key] = nested
    return result


def _merge(old: dict, new: dict, rules: dict[str, FieldSpec] | None, prefix: str) -> dict:
    result = copy.deepcopy(old)
    for key, value in new.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        spec = rules.get(key) if rules else None
        current = result.get(key)
        both_set = current is not None and value is not None
        if spec is not None and spec.merge_strategy == "replace":
            result[key] = copy.deepcopy(value)
        elif both_set and isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge(current, value, spec.children if spec else None, path)
        elif spec is not None and both_set and (isinstance(current, dict) or isinstance(value, dict)):
            raise MergeTypeError(path, current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _check_type(spec: FieldSpec, value: Any) -> str | None:
    value_type = spec.value_type
    adapter = _MAPPING_ADAPTER if spec.is_mapping else _TYPE_ADAPTERS.get(value_type)
    if adapter is None:
        return None
    try:
        adapter.validate_python(value, strict=True)
    except PydanticValidationError:
        return f"must be of type {value_type}"
    if value_type == "email" and not _EMAIL_RE.match(value):
        return "must be a valid email address"
    return None


def _check_rules(spec: FieldSpec, value: Any) -> list[str]:
    rules = spec.validate_
    messages = []
    if rules.pattern and isinstance(value, str) and not re.fullmatch(rules.pattern, value):
        messages.append(f"does not match pattern {rules.pattern!r}")
    size = value if isinstance(value, (int, float)) and not isinstance(value, bool) else None
    if isinstance(value, (str, list, dict)):
        size = len(value)
    if size is not None:
        if rules.min is not None and size < rules.min:
            messages.append(f"must be at least {rules.min:g}")
        if rules.max is not None and size > rules.max:
            messages.append(f"must be at most {rules.max:g}")
    if spec.options is not None:
        values = value if isinstance(value, list) else [value]
        invalid = [v for v in values if v not in spec.options]
        if invalid:
            messages.append(f"has invalid option(s) {invalid!r}")
    return messages


def _validate(rules: dict[str, FieldSpec], data: dict, errors: list[tuple[str, str]]) -> None:
    for key, spec in rules.items():
        value = data.get(key)
        if value in _EMPTY:
            if spec.validate_.required:
                errors.append((spec.name, "is required"))
            continue
        type_error = _check_type(spec, value)
        if type_error:
            errors.append((spec.name, type_error))
            continue
        errors.extend((spec.name, message) for message in _check_rules(spec, value))
        if spec.children and isinstance(value, dict):
            _validate(spec.children, value, errors)


def _filter(rules: dict[str, FieldSpec], data: dict) -> dict:
    result = {}
    for key, value in data.items():
        spec = rules.get(key)
        if spec is None:
            continue
        if spec.children and isinstance(value, dict):
            result[key] = _filter(spec.children, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _extra(rules: dict[str, FieldSpec], data: dict) -> dict:
    result = {}
    for key, value in data.items():
        spec = rules.get(key)
        if spec is None:
            result[key] = copy.deepcopy(value)
        elif spec.children and isinstance(value, dict):
            nested = _extra(spec.children, value)
            if nested:
                result[key] = nested
    return result
