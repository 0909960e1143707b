"""Directory of user account records."""

from __future__ import annotations

from pathlib import Path

from record_store import Blueprint, FsStorage, RecordDirectory

from .authentication import BcryptHasher, PasswordHasher
from .authorization import AuthorizationEngine
from .config import ConfigStore
from .user import UserRecord

ACCOUNT_BLUEPRINT = Path(__file__).resolve().parent / "blueprints" / "account.yaml"


class AccountsDirectory(RecordDirectory):
    """Record directory for accounts, carrying the services accounts depend on."""

    record_class = UserRecord

    def __init__(
        self,
        storage: FsStorage,
        config: ConfigStore | None = None,
        hasher: PasswordHasher | None = None,
        blueprint: Blueprint | None = None,
        media_root: Path | str | None = None,
        media_base_url: str = "",
    ) -> None:
        super().__init__(
            storage,
            blueprint=blueprint or Blueprint.from_file(ACCOUNT_BLUEPRINT),
            media_root=media_root,
            media_base_url=media_base_url,
        )
        self.config = config or ConfigStore()
        self.hasher = hasher or BcryptHasher()
        self.authorization = AuthorizationEngine(self.config)

    def get_storage_key(self, key: str) -> str:
        return key.lower()
