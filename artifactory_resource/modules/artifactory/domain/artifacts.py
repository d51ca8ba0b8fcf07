"""Artifacts to deploy and artifacts already held by the server."""

from __future__ import annotations

import io
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Dict, Mapping, Optional

from artifactory_resource.modules.files.checksum import Checksums

from .build import parse_date


class DeployOption(str, Enum):
    DISABLE_CHECKSUM_UPLOADS = "disable-checksum-uploads"


class DeployableArtifact(ABC):
    """A single artifact that can be deployed to a repository.

    ``path`` is repository relative and always starts with ``/``. Checksums are
    calculated from the content on first access and cached afterwards.
    """

    def __init__(
        self,
        path: str,
        properties: Optional[Mapping[str, str]] = None,
        checksums: Optional[Checksums] = None,
    ) -> None:
        if not path:
            raise ValueError("Path must not be empty")
        if not path.startswith("/"):
            raise ValueError(f"Path '{path}' must start with '/'")
        self.path = path
        self.properties: Dict[str, str] = dict(properties or {})
        self._checksums = checksums
        self._lock = threading.Lock()

    @property
    def checksums(self) -> Checksums:
        with self._lock:
            if self._checksums is None:
                with self.open() as content:
                    self._checksums = Checksums.calculate(content)
            return self._checksums

    @property
    @abstractmethod
    def size(self) -> int:
        ...

    @abstractmethod
    def open(self) -> BinaryIO:
        """Return a fresh stream over the artifact content."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={self.path!r})"


class DeployableFileArtifact(DeployableArtifact):
    """Artifact backed by a local file."""

    def __init__(
        self,
        path: str,
        file: Path,
        properties: Optional[Mapping[str, str]] = None,
        checksums: Optional[Checksums] = None,
    ) -> None:
        super().__init__(path, properties, checksums)
        self.file = Path(file)

    @classmethod
    def from_file(
        cls,
        root: Path,
        file: Path,
        properties: Optional[Mapping[str, str]] = None,
        checksums: Optional[Checksums] = None,
    ) -> "DeployableFileArtifact":
        return cls(calculate_path(root, file), file, properties, checksums)

    @property
    def size(self) -> int:
        return self.file.stat().st_size

    def open(self) -> BinaryIO:
        return open(self.file, "rb")


class DeployableBytesArtifact(DeployableArtifact):
    """Artifact backed by an in-memory byte string."""

    def __init__(
        self,
        path: str,
        content: bytes,
        properties: Optional[Mapping[str, str]] = None,
        checksums: Optional[Checksums] = None,
    ) -> None:
        super().__init__(path, properties, checksums)
        self.content = bytes(content)

    @property
    def size(self) -> int:
        return len(self.content)

    def open(self) -> BinaryIO:
        return io.BytesIO(self.content)


def calculate_path(root: Path, file: Path) -> str:
    """Repository path of ``file`` relative to ``root``, e.g. ``/com/example/foo.jar``."""
    relative = Path(file).relative_to(root)
    return "/" + relative.as_posix()


@dataclass(frozen=True)
class DeployedArtifact:
    """An artifact returned from an ``items.find`` search."""

    repo: str
    path: str
    name: str
    type: Optional[str] = None
    size: int = 0
    created: Optional[datetime] = None
    created_by: Optional[str] = None
    modified: Optional[datetime] = None
    modified_by: Optional[str] = None
    updated: Optional[datetime] = None

    @property
    def full_path(self) -> str:
        return f"{self.path}/{self.name}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployedArtifact":
        for key in ("repo", "path", "name"):
            if not data.get(key):
                raise ValueError(f"Deployed artifact is missing '{key}'")
        return cls(
            repo=data["repo"],
            path=data["path"],
            name=data["name"],
            type=data.get("type"),
            size=int(data.get("size") or 0),
            created=_optional_date(data.get("created")),
            created_by=data.get("created_by", data.get("created-by")),
            modified=_optional_date(data.get("modified")),
            modified_by=data.get("modified_by", data.get("modified-by")),
            updated=_optional_date(data.get("updated")),
        )


def _optional_date(value: Optional[str]) -> Optional[datetime]:
    return parse_date(value) if value else None
