"""Password hashing and verification."""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol

import bcrypt


class VerifyResult(IntEnum):
    FAIL = 0
    OK = 1
    NEEDS_REHASH = 2


class PasswordHasher(Protocol):
    def verify(self, password: str, hashed: str | None) -> VerifyResult: ...

    def create(self, password: str) -> str: ...


class BcryptHasher:
    """bcrypt hashes; a stored hash with a different cost needs rehashing."""

    prefix = "2b"

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def create(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds, prefix=self.prefix.encode("ascii"))
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    def verify(self, password: str, hashed: str | None) -> VerifyResult:
        if not hashed:
            # Burn the same time as a real check.
            self._check(password, self._get_dummy_hash())
            return VerifyResult.FAIL
        if not self._check(password, hashed):
            return VerifyResult.FAIL
        if self.needs_rehash(hashed):
            return VerifyResult.NEEDS_REHASH
        return VerifyResult.OK

    def needs_rehash(self, hashed: str) -> bool:
        parts = hashed.split("$")
        if len(parts) < 4:
            return True
        try:
            cost = int(parts[2])
        except ValueError:
            return True
        return parts[1] != self.prefix or cost != self.rounds

    def _check(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed hash or over-long password.
            return False

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.create("dummy-password")
        return self._dummy_hash
