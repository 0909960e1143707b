"""Lookup and search over stored user accounts."""

from __future__ import annotations

from typing import Iterator

from .directory import AccountsDirectory
from .user import UserRecord


class UserCollection:
    """All accounts in one directory.

    Records are read from storage on every lookup; nothing is cached.
    """

    def __init__(self, directory: AccountsDirectory) -> None:
        self._directory = directory

    def directory(self) -> AccountsDirectory:
        return self._directory

    def lookup(self, key: str) -> UserRecord | None:
        """Exact, case-insensitive username lookup."""
        if not key:
            return None
        return self._directory.load_record(key.lower())

    def __getitem__(self, key: str) -> UserRecord | None:
        return self.lookup(key)

    def search(self, query: str, field: str = "username") -> UserRecord | None:
        """First account whose ``field`` equals ``query`` (case-insensitive)."""
        if not query:
            return None
        needle = str(query).casefold()
        for user in self._directory.iter_records():
            value = user.get_nested_property(field)
            if value is not None and str(value).casefold() == needle:
                return user
        return None

    def keys(self) -> list[str]:
        return self._directory.keys()

    def __iter__(self) -> Iterator[UserRecord]:
        return iter(self._directory.iter_records())

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: str) -> bool:
        return bool(key) and self._directory.storage.exists(key.lower())
