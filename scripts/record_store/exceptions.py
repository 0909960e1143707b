"""Errors raised by the record layer."""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base class for all record layer errors."""


class PathConflict(RecordStoreError):
    """A nested-property write hit a scalar where a mapping was expected."""

    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        super().__init__(f"Cannot set {path!r}: {segment!r} is not a mapping")


class ValidationError(RecordStoreError):
    """One or more blueprint constraints were violated.

    ``errors`` holds every violation as a ``(path, message)`` pair.
    """

    def __init__(self, errors: list[tuple[str, str]]):
        self.errors = list(errors)
        lines = "; ".join(f"{path}: {message}" for path, message in self.errors)
        super().__init__(f"Validation failed ({len(self.errors)} errors): {lines}")

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.errors]


class MergeTypeError(RecordStoreError):
    """Tried to merge a mapping with a non-mapping value."""

    def __init__(self, path: str, old, new):
        self.path = path
        super().__init__(
            f"Cannot merge {type(new).__name__} into {type(old).__name__} at {path or '<root>'!r}"
        )


class StorageError(RecordStoreError):
    """Persistence read or write failed."""


class ConfigurationError(RecordStoreError):
    """The runtime context needed to bind a record could not be resolved."""
