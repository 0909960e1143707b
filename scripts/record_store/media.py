"""Media files attached to a record (avatars and other uploads)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .formatters import YamlFormatter

_META_SUFFIX = ".meta.yaml"


@dataclass
class UploadedFile:
    """A file accepted by an upload form, not yet moved into record media."""

    client_filename: str
    type: str = ""
    size: int = 0
    tmp_name: str | None = None
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["name"] = data.pop("client_filename")
        return data


@dataclass
class MediaFile:
    path: Path
    base_url: str

    @property
    def name(self) -> str:
        return self.path.name

    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.name}"

    def metadata(self) -> dict:
        """Sidecar metadata stored next to the file as ``<name>.meta.yaml``."""
        meta = self.path.with_name(self.name + _META_SUFFIX)
        if not meta.is_file():
            return {}
        data = YamlFormatter().decode(meta.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}


class FolderMedia:
    """Resolves file names inside one folder to :class:`MediaFile` objects."""

    def __init__(self, folder: Path | str, base_url: str) -> None:
        self.folder = Path(folder)
        self.base_url = base_url

    def resolve(self, filename: str) -> MediaFile | None:
        if not filename or "/" in filename or "\\" in filename or filename.startswith("."):
            return None
        path = self.folder / filename
        if not path.is_file():
            return None
        return MediaFile(path, self.base_url)

    def __getitem__(self, filename: str) -> MediaFile | None:
        return self.resolve(filename)

    def files(self) -> list[str]:
        if not self.folder.is_dir():
            return []
        return sorted(
            fp.name for fp in self.folder.iterdir()
            if fp.is_file() and not fp.name.endswith(_META_SUFFIX) and not fp.name.startswith(".")
        )


class MediaCapability:
    """Media owned by one record: resized files in its folder, originals in ``original/``."""

    def __init__(self, folder: Path | str, base_url: str) -> None:
        self.folder = Path(folder)
        self.media = FolderMedia(self.folder, base_url)
        self.original = FolderMedia(self.folder / "original", f"{base_url.rstrip('/')}/original")

    def order(self, preferred: list[str] | None = None) -> list[str]:
        """File names, ``preferred`` ones first in the given order."""
        files = self.media.files()
        head = [name for name in (preferred or []) if name in files]
        return head + [name for name in files if name not in head]
