"""Wiring for the account layer: storage, config, hashing and directories."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from record_store import (
    DirectoryRegistry,
    FsStorage,
    Record,
    RecordSnapshot,
    StorageLayout,
    YamlFormatter,
    rehydrate,
)
from store_utils import conf

from .authentication import BcryptHasher, PasswordHasher
from .collection import UserCollection
from .config import ConfigStore
from .directory import AccountsDirectory


@dataclass
class AccountsContext:
    """Explicit runtime context passed to whatever needs accounts."""

    users: UserCollection
    config: ConfigStore
    registry: DirectoryRegistry = field(default_factory=DirectoryRegistry)

    def __post_init__(self) -> None:
        self.registry.register(self.users.directory())

    @classmethod
    def create(
        cls,
        accounts_dir: Path | str | None = None,
        config: ConfigStore | None = None,
        hasher: PasswordHasher | None = None,
        layout: StorageLayout = StorageLayout.FILE,
        formatter=None,
        media_dir: Path | str | None = None,
        media_base_url: str = conf.MEDIA_BASE_URL,
    ) -> AccountsContext:
        """Build a context; unspecified paths come from ``store_utils.conf``."""
        config = config or ConfigStore.from_file(conf.CONFIG_FILE)
        storage = FsStorage(
            accounts_dir or conf.ACCOUNTS_DIR,
            layout=layout,
            formatter=formatter or YamlFormatter(),
            record_file="user",
        )
        if media_dir is None and layout == StorageLayout.FILE:
            media_dir = conf.MEDIA_DIR
        directory = AccountsDirectory(
            storage,
            config=config,
            hasher=hasher or BcryptHasher(),
            media_root=media_dir,
            media_base_url=media_base_url,
        )
        return cls(users=UserCollection(directory), config=config)

    def get_directory(self, record_type: str) -> AccountsDirectory | None:
        return self.registry.get(record_type)

    def rehydrate(self, snapshot: RecordSnapshot | dict) -> Record:
        return rehydrate(snapshot, self.registry)
