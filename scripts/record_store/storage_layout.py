"""Storage layout types for persisted records."""

from enum import Enum


class StorageLayout(str, Enum):
    """How a single record is persisted on disk."""

    FILE = "file"      # standalone <key>.<ext> file
    FOLDER = "folder"  # <key>/ directory with <record_file>.<ext> inside, media alongside
