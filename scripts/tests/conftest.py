"""Pytest fixtures for record and account tests."""

import pytest

from accounts import AccountsContext, BcryptHasher, ConfigStore
from store_utils import conf, log

GROUPS = {
    "admin": {"access": {"site": {"login": True, "edit": True}, "admin": {"login": True}}},
    "editors": {"access": {"site": {"login": "yes", "edit": "on"}}},
    "banned": {"access": {"site": {"login": False}}},
}


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    """Send the accounts log into the test's temp directory."""
    monkeypatch.setattr(conf, "LOG_FILE", tmp_path / "logs" / "accounts.log")
    monkeypatch.setattr(log, "first_line", True)
    yield conf.LOG_FILE


@pytest.fixture
def hasher():
    # Lowest bcrypt cost keeps the suite fast.
    return BcryptHasher(rounds=4)


@pytest.fixture
def config():
    return ConfigStore({"groups": GROUPS})


@pytest.fixture
def context(tmp_path, config, hasher):
    return AccountsContext.create(
        accounts_dir=tmp_path / "accounts",
        config=config,
        hasher=hasher,
        media_dir=tmp_path / "media",
        media_base_url="/user/accounts",
    )


@pytest.fixture
def users(context):
    return context.users
