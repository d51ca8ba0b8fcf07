"""Build runs and the build-info document published after a deploy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

DATE_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def parse_date(value: str) -> datetime:
    """Parse ``2014-09-30T12:00:19.893+0000`` style timestamps (``Z`` and ``+00:00`` also accepted)."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unsupported date '{value}'")


def to_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive timestamps as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(value: datetime) -> str:
    """Render a timestamp as ``yyyy-MM-ddTHH:mm:ss.SSSZ`` in UTC."""
    value = to_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class BuildNumber:
    value: str

    @classmethod
    def of(cls, number: str, prefix: Optional[str] = None) -> "BuildNumber":
        if not number:
            raise ValueError("Build number must not be empty")
        return cls(f"{prefix}{number}" if prefix else number)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BuildRun:
    """A single run of a named build. Ordered by ``started`` only."""

    build_number: str
    started: datetime

    def __lt__(self, other: "BuildRun") -> bool:
        return self.started < other.started

    @classmethod
    def from_listing(cls, data: Dict[str, Any]) -> "BuildRun":
        uri = data.get("uri") or ""
        if not uri.startswith("/"):
            raise ValueError(f"Unexpected build run uri '{uri}'")
        return cls(build_number=uri[1:], started=parse_date(data["started"]))

    @classmethod
    def from_search(cls, data: Dict[str, Any]) -> "BuildRun":
        return cls(build_number=data["build.number"], started=parse_date(data["build.started"]))


@dataclass(frozen=True)
class BuildArtifact:
    type: str
    sha1: str
    md5: str
    name: str

    def __post_init__(self) -> None:
        for name in ("type", "sha1", "md5", "name"):
            if not getattr(self, name):
                raise ValueError(f"Build artifact {name} must not be empty")

    def as_dict(self) -> Dict[str, str]:
        return {"type": self.type, "sha1": self.sha1, "md5": self.md5, "name": self.name}


@dataclass(frozen=True)
class BuildModule:
    id: str
    artifacts: List[BuildArtifact] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "artifacts": [artifact.as_dict() for artifact in self.artifacts]}


@dataclass(frozen=True)
class ContinuousIntegrationAgent:
    name: str = "Concourse"
    version: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "version": self.version}

    def __str__(self) -> str:
        return f"{self.name}:{self.version or 'unknown'}"


@dataclass
class BuildInfo:
    build_name: str
    build_number: str
    agent: Optional[ContinuousIntegrationAgent] = None
    started: Optional[datetime] = None
    build_uri: Optional[str] = None
    modules: List[BuildModule] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.build_name:
            raise ValueError("Build name must not be empty")
        if not self.build_number:
            raise ValueError("Build number must not be empty")
        if self.started is None:
            self.started = datetime.now(timezone.utc)

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.build_name,
            "number": self.build_number,
            "started": format_date(self.started),
            "modules": [module.as_dict() for module in self.modules],
        }
        if self.agent is not None:
            payload["agent"] = self.agent.as_dict()
        if self.build_uri:
            payload["url"] = self.build_uri
        if self.properties:
            payload["properties"] = dict(self.properties)
        return payload
