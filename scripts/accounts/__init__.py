"""User accounts: authentication, authorization and profile data on top of record_store."""

from .authentication import BcryptHasher, PasswordHasher, VerifyResult
from .authorization import AuthorizationEngine, is_positive
from .collection import UserCollection
from .config import ConfigStore
from .context import AccountsContext
from .directory import AccountsDirectory
from .user import UserRecord

__all__ = [
    "BcryptHasher",
    "PasswordHasher",
    "VerifyResult",
    "AuthorizationEngine",
    "is_positive",
    "UserCollection",
    "ConfigStore",
    "AccountsContext",
    "AccountsDirectory",
    "UserRecord",
]
