"""Group and per-user permission evaluation."""

from __future__ import annotations

from typing import Any, Protocol

from store_utils.log import store_log

from .config import ConfigStore

_POSITIVE_STRINGS = frozenset({"1", "yes", "on", "true"})


def is_positive(value: Any) -> bool:
    """True only for ``True``, ``1``, ``'1'``, ``'yes'``, ``'on'`` and ``'true'``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value in _POSITIVE_STRINGS
    return False


class PermissionHolder(Protocol):
    def get_property(self, name: str, default: Any = None) -> Any: ...

    def get_nested_property(self, path: str, default: Any = None, separator: str | None = None) -> Any: ...


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict):
        return list(value.values())
    return [value]


class AuthorizationEngine:
    def __init__(self, config: ConfigStore) -> None:
        self.config = config

    def authorize(self, user: PermissionHolder, action: str, scope: str | None = None) -> bool:
        """Decide whether ``user`` may perform ``action``. Never raises."""
        try:
            return self._authorize(user, action, scope)
        except Exception as exc:
            store_log(f"Authorization of {action!r} failed closed: {exc!r}")
            return False

    def _authorize(self, user: PermissionHolder, action: str, scope: str | None) -> bool:
        if user.get_property("authenticated") is not True:
            return False
        if user.get_property("state") != "enabled":
            return False

        if scope is not None:
            action = f"{scope}.{action}"

        authorized = False

        # Group access level; the first granting group wins.
        for group in _as_list(user.get_property("groups")):
            permission = self.config.get(f"groups.{group}.access.{action}")
            authorized = is_positive(permission)
            if authorized:
                break

        # User access level replaces the group result when set.
        check = f"access.{action}"
        permission = user.get_property(check)
        if permission is None:
            permission = user.get_nested_property(check)
        if permission is not None:
            authorized = is_positive(permission)

        return authorized
