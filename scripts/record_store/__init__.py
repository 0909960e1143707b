"""Record layer: nested property trees, blueprints and file-backed records."""

from .blueprint import Blueprint, FieldRules, FieldSpec
from .directory import RecordDirectory
from .exceptions import (
    ConfigurationError,
    MergeTypeError,
    PathConflict,
    RecordStoreError,
    StorageError,
    ValidationError,
)
from .formatters import JsonFormatter, YamlFormatter, formatter_for
from .fs_storage import FsStorage
from .media import FolderMedia, MediaCapability, MediaFile, UploadedFile
from .nested import NestedPropertyStore
from .record import Record
from .registry import DirectoryRegistry
from .snapshot import RecordSnapshot, StorageDescriptor, rehydrate
from .storage_layout import StorageLayout

__all__ = [
    "Blueprint",
    "FieldRules",
    "FieldSpec",
    "RecordDirectory",
    "ConfigurationError",
    "MergeTypeError",
    "PathConflict",
    "RecordStoreError",
    "StorageError",
    "ValidationError",
    "JsonFormatter",
    "YamlFormatter",
    "formatter_for",
    "FsStorage",
    "FolderMedia",
    "MediaCapability",
    "MediaFile",
    "UploadedFile",
    "NestedPropertyStore",
    "Record",
    "DirectoryRegistry",
    "RecordSnapshot",
    "StorageDescriptor",
    "rehydrate",
    "StorageLayout",
]
