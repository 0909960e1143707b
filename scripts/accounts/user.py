"""User account record.

Adds authentication, authorization, avatar resolution and blueprint
helpers on top of :class:`record_store.Record`.
"""

from __future__ import annotations

import hashlib
import warnings
from typing import TYPE_CHECKING, Any, Iterable

from record_store import (
    FsStorage,
    JsonFormatter,
    MediaFile,
    MergeTypeError,
    Record,
    RecordSnapshot,
    StorageDescriptor,
    UploadedFile,
    YamlFormatter,
)
from store_utils.log import store_log

from .authentication import VerifyResult

if TYPE_CHECKING:
    from .collection import UserCollection
    from .directory import AccountsDirectory

GRAVATAR_URL = "https://www.gravatar.com/avatar/"

# Never persisted; only the login flow may set these.
SESSION_FIELDS = ("authenticated", "authorized")
PASSWORD_FIELDS = ("password", "password1", "password2")


class UserRecord(Record):
    """A user account.

    Always constructed through a directory; ``authenticated`` and
    ``authorized`` are dropped from the initial elements.
    """

    record_type = "users"

    @classmethod
    def load(cls, users: UserCollection, username: str) -> UserRecord:
        """Load user account.

        Always returns a record. Use :meth:`exists` to check whether it is stored.
        """
        if username != "":
            key = username.lower()
            user = users[key]
            if user is not None:
                return user
        else:
            key = ""

        return users.directory().create_record({"username": username, "state": "enabled"}, key)

    @classmethod
    def find(cls, users: UserCollection, query: str, fields: Iterable[str] = ("username", "email")) -> UserRecord:
        """Find a user by username, email, etc. Falls back to an empty placeholder."""
        for field in fields:
            if field == "username":
                user = users[query.lower()]
            else:
                user = users.search(query, field)
            if user is not None:
                return user

        return cls.load(users, "")

    @classmethod
    def remove(cls, users: UserCollection, username: str) -> bool:
        """Remove user account. Returns True if the account existed."""
        user = cls.load(users, username)

        exists = user.exists()
        if exists:
            user.delete()

        return exists

    def __init__(self, elements: dict, key: str, directory: AccountsDirectory, validate: bool = False) -> None:
        elements = {k: v for k, v in dict(elements).items() if k not in SESSION_FIELDS}

        super().__init__(elements, key, directory, validate)

        self.def_property("username", key)
        self.def_property("state", "enabled")
        self._uploads: dict[str, UploadedFile | None] = {}

    # -- Attribute access --

    @property
    def username(self) -> str:
        return self.get_property("username", "")

    @property
    def email(self) -> str | None:
        return self.get_property("email")

    @property
    def fullname(self) -> str | None:
        return self.get_property("fullname")

    @property
    def state(self) -> str:
        return self.get_property("state", "enabled")

    @property
    def groups(self) -> list:
        return list(self.get_property("groups", []))

    @property
    def access(self) -> dict:
        return dict(self.get_property("access", {}))

    @property
    def authenticated(self) -> bool:
        return self.get_property("authenticated") is True

    @authenticated.setter
    def authenticated(self, value: bool) -> None:
        self.set_property("authenticated", bool(value))

    @property
    def authorized(self) -> bool:
        return self.get_property("authorized") is True

    @authorized.setter
    def authorized(self, value: bool) -> None:
        self.set_property("authorized", bool(value))

    # -- Dot notation --

    def get(self, name: str, default: Any = None, separator: str | None = None) -> Any:
        """Get value by using dot notation for nested dicts.

        Example: ``value = user.get('this.is.my.nested.variable')``
        """
        return self.get_nested_property(name, default, separator)

    def set(self, name: str, value: Any, separator: str | None = None) -> UserRecord:
        """Set value by using dot notation for nested dicts."""
        self.set_nested_property(name, value, separator)
        return self

    def undef(self, name: str, separator: str | None = None) -> UserRecord:
        """Unset value by using dot notation for nested dicts."""
        self.unset_nested_property(name, separator)
        return self

    def def_(self, name: str, default: Any = None, separator: str | None = None) -> UserRecord:
        """Set default value by using dot notation for nested dicts."""
        self.def_nested_property(name, default, separator)
        return self

    def value(self, name: str, default: Any = None, separator: str | None = None) -> Any:
        """Form value for ``name``; file fields are resolved to media info."""
        value = self.get_nested_property(name, None, separator)

        if name == "avatar":
            return self._parse_file_property(value)

        if value is None and name == "media_order":
            return ",".join(self.get_media_order())

        return default if value is None else value

    def get_property(self, name: str, default: Any = None) -> Any:
        value = super().get_property(name, default)

        if name == "avatar":
            value = self._parse_file_property(value)

        return value

    # -- Conversion --

    def count(self) -> int:
        return len(self.jsonable())

    def to_dict(self) -> dict:
        data = self.jsonable()
        data["avatar"] = self._parse_file_property(data.get("avatar"))
        return data

    def to_yaml(self, inline: int = 5, indent: int = 2) -> str:
        return YamlFormatter(inline=inline, indent=indent).encode(self.to_dict())

    def to_json(self) -> str:
        return JsonFormatter().encode(self.to_dict())

    # -- Blueprint helpers --

    def join(self, name: str, value: Any, separator: str | None = None) -> UserRecord:
        """Join nested values together by using blueprints."""
        old = self.get(name, None, separator)
        if old is not None:
            if not isinstance(old, dict) or not isinstance(value, dict):
                raise MergeTypeError(name, old, value)
            value = self.get_blueprint().merge_data(old, value, name, separator)

        self.set(name, value, separator)
        return self

    def get_defaults(self) -> dict:
        """Nested structure of blueprint defaults. Fields without a default are left out."""
        return self.get_blueprint().get_defaults()

    def join_defaults(self, name: str, value: Any, separator: str | None = None) -> UserRecord:
        """Set default values by using blueprints; existing values win."""
        old = self.get(name, None, separator)
        if old is not None:
            value = self.get_blueprint().merge_data(value, old, name, separator)

        self.set_nested_property(name, value, separator)
        return self

    def get_joined(self, name: str, value: Any, separator: str | None = None) -> dict:
        """Return the stored value at ``name`` joined with ``value``, without saving it."""
        if not isinstance(value, dict):
            raise MergeTypeError(name, None, value)

        old = self.get(name, None, separator)
        if old is None:
            return value

        if not isinstance(old, dict):
            raise MergeTypeError(name, old, value)

        return self.get_blueprint().merge_data(old, value, name, separator)

    def merge(self, data: dict) -> UserRecord:
        warnings.warn(
            "UserRecord.merge() is deprecated, use validate()/filter() with set_elements() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        self.set_elements(self.get_blueprint().merge_data(self.jsonable(), data))
        return self

    def set_defaults(self, data: dict) -> UserRecord:
        """Fill in values from ``data`` that are not already set."""
        self.set_elements(self.get_blueprint().merge_data(data, self.jsonable()))
        return self

    def validate(self) -> UserRecord:
        self.get_blueprint().validate(self.jsonable())
        return self

    def filter(self) -> UserRecord:
        self.set_elements(self.get_blueprint().filter(self.jsonable()))
        return self

    def extra(self) -> dict:
        """Items which haven't been defined in the blueprint."""
        return self.get_blueprint().extra(self.jsonable())

    # -- Storage --

    def raw(self) -> str:
        """Stored text of the account. Unsaved changes are not included."""
        if not self.exists():
            return ""
        return self.storage_backend.raw(self.get_storage().storage_key)

    @property
    def storage_backend(self) -> FsStorage:
        return self.directory.storage

    def file(self, storage: StorageDescriptor | dict | None = None) -> StorageDescriptor:
        """Get, or replace and get, the storage descriptor."""
        if storage is not None:
            self.set_storage(storage)
        return self.get_storage()

    # -- Authentication --

    def authenticate(self, password: str) -> bool:
        """Check ``password``; a hash that needs updating is rotated and saved."""
        # Always execute verify to protect us from timing attacks
        hashed = self.get_property("hashed_password") or self.directory.config.get("system.security.default_hash")
        result = self.directory.hasher.verify(password, hashed)

        plaintext_password = self.get_property("password")
        if plaintext_password is not None:
            # Plain-text password is still stored, check if it matches
            if password != plaintext_password:
                return False

            # Force hash update to get rid of plaintext password
            result = VerifyResult.NEEDS_REHASH

        if result == VerifyResult.NEEDS_REHASH:
            self.set_property("password", password)
            self.save()
            store_log(f"Rehashed password for user {self.key!r}")

        return bool(result)

    def save(self) -> UserRecord:
        password = self.get_property("password")
        if password is not None:
            for name in PASSWORD_FIELDS:
                self.unset_property(name)
            self.set_property("hashed_password", self.directory.hasher.create(password))

        return super().save()

    def prepare_storage(self) -> dict:
        elements = super().prepare_storage()

        # Do not save authorization information.
        for name in SESSION_FIELDS:
            elements.pop(name, None)

        return elements

    # -- Authorization --

    def authorize(self, action: str, scope: str | None = None) -> bool:
        """Check whether the user may perform ``action`` (optionally within ``scope``)."""
        return self.directory.authorization.authorize(self, action, scope)

    def authorise(self, action: str) -> bool:
        warnings.warn(
            "UserRecord.authorise() is deprecated, use authorize() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.authorize(action)

    # -- Media --

    def get_media_order(self) -> list[str]:
        media = self.media
        if media is None:
            return []
        order = self.get_nested_property("media_order")
        preferred = [name.strip() for name in order.split(",")] if isinstance(order, str) else None
        return media.order(preferred)

    def get_avatar_media(self) -> MediaFile | None:
        """Media file of the uploaded avatar, if any."""
        avatar = super().get_property("avatar")
        if isinstance(avatar, dict) and avatar and self.media is not None:
            info = next(iter(avatar.values()))
            if isinstance(info, dict):
                return self.media.media.resolve(info.get("name", ""))

        return None

    def avatar_url(self) -> str:
        avatar = self.get_avatar_media()
        if avatar is not None:
            return avatar.url()

        provider = super().get_property("provider")
        if isinstance(provider, dict):
            if provider.get("avatar_url"):
                return provider["avatar_url"]
            if provider.get("avatar"):
                return provider["avatar"]

        email = str(self.get_property("email") or "").strip().lower()
        return GRAVATAR_URL + hashlib.md5(email.encode("utf-8")).hexdigest()

    @property
    def uploads(self) -> dict[str, UploadedFile | None]:
        return dict(self._uploads)

    def set_updated_media(self, files: dict[str, dict[str, UploadedFile | None]]) -> None:
        """Record uploaded (or removed) files under their form field."""
        uploads: dict[str, UploadedFile | None] = {}
        for field, group in files.items():
            for filename, upload in group.items():
                uploads[filename] = upload
                if upload is not None:
                    data = upload.to_dict()
                    data.pop("tmp_name", None)
                    data.pop("path", None)
                    # File names may contain dots, so use a newline separator.
                    self.set_nested_property(f"{field}\n{upload.client_filename}", data, "\n")
                else:
                    self.unset_nested_property(f"{field}\n{filename}", "\n")

        self._uploads = uploads

    def _parse_file_property(self, value: Any) -> Any:
        if not isinstance(value, dict):
            return value

        media = self.media
        result: dict[str, dict] = {}
        if media is None:
            return result

        for filename, info in value.items():
            if not isinstance(info, dict):
                continue

            thumb_file = media.media.resolve(filename)
            image_file = media.original.resolve(filename) or thumb_file
            if thumb_file is not None:
                result[filename] = {
                    "name": filename,
                    "type": info.get("type"),
                    "size": info.get("size"),
                    "image_url": image_file.url(),
                    "thumb_url": thumb_file.url(),
                    "crop_data": image_file.metadata().get("upload", {}).get("crop", {}),
                }

        return result

    # -- Serialization --

    def serialize(self) -> RecordSnapshot:
        snapshot = super().serialize()
        elements = {k: v for k, v in snapshot.elements.items() if k not in SESSION_FIELDS}
        return snapshot.model_copy(update={"elements": elements})
