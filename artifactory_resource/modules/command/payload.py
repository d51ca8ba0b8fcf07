"""Request and response payloads of the check, in and out commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from artifactory_resource.exceptions import InvalidRequestError


def _required(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or not str(value).strip():
        raise InvalidRequestError(f"Missing required field {key}")
    return str(value).strip()


def _optional(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _flag(payload: Dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _patterns(payload: Dict[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _string_map(payload: Dict[str, Any], key: str) -> Dict[str, str]:
    value = payload.get(key) or {}
    if not isinstance(value, dict):
        raise InvalidRequestError(f"{key} must be an object")
    return {str(name): str(item) for name, item in value.items()}


def _section(payload: Any, key: str, required: bool = True) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidRequestError("request payload must be a JSON object")
    value = payload.get(key)
    if value is None:
        if required:
            raise InvalidRequestError(f"Missing required field {key}")
        return {}
    if not isinstance(value, dict):
        raise InvalidRequestError(f"{key} must be an object")
    return value


@dataclass
class Source:
    uri: str
    build_name: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    project: Optional[str] = None
    build_number_prefix: Optional[str] = None
    check_limit: Optional[int] = None
    admin: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Source":
        check_limit = payload.get("check_limit")
        try:
            check_limit = int(check_limit) if check_limit not in (None, "") else None
        except (TypeError, ValueError) as exc:
            raise InvalidRequestError(f"check_limit must be a number, got {check_limit!r}") from exc
        if check_limit is not None and check_limit < 1:
            raise InvalidRequestError("check_limit must be positive")
        return cls(
            uri=_required(payload, "uri"),
            build_name=_required(payload, "build_name"),
            username=_optional(payload, "username"),
            password=_optional(payload, "password"),
            project=_optional(payload, "project"),
            build_number_prefix=_optional(payload, "build_number_prefix"),
            check_limit=check_limit,
            admin=_flag(payload, "admin", False),
        )


@dataclass(frozen=True)
class Version:
    build_number: str

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> Optional["Version"]:
        if not payload:
            return None
        build_number = _optional(payload, "build_number")
        return cls(build_number) if build_number else None

    def as_dict(self) -> Dict[str, str]:
        return {"build_number": self.build_number}


@dataclass
class CheckRequest:
    source: Source
    version: Optional[Version] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CheckRequest":
        return cls(
            source=Source.from_payload(_section(payload, "source")),
            version=Version.from_payload(_section(payload, "version", required=False)),
        )


@dataclass
class InParams:
    download_artifacts: bool = True
    download_checksums: bool = True
    save_build_info: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "InParams":
        return cls(
            download_artifacts=_flag(payload, "download_artifacts", True),
            download_checksums=_flag(payload, "download_checksums", True),
            save_build_info=_flag(payload, "save_build_info", False),
        )


@dataclass
class InRequest:
    source: Source
    version: Version
    params: InParams = field(default_factory=InParams)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "InRequest":
        version = Version.from_payload(_section(payload, "version"))
        if version is None:
            raise InvalidRequestError("Missing required field version.build_number")
        return cls(
            source=Source.from_payload(_section(payload, "source")),
            version=version,
            params=InParams.from_payload(_section(payload, "params", required=False)),
        )


@dataclass
class ArtifactSet:
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ArtifactSet":
        return cls(
            include=_patterns(payload, "include"),
            exclude=_patterns(payload, "exclude"),
            properties=_string_map(payload, "properties"),
        )


@dataclass
class OutParams:
    repo: str
    folder: str
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    build_number: Optional[str] = None
    build_uri: Optional[str] = None
    build_properties: Dict[str, str] = field(default_factory=dict)
    strip_snapshot_timestamps: bool = True
    disable_checksum_uploads: bool = False
    threads: Optional[int] = None
    sign: bool = False
    artifact_set: List[ArtifactSet] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "OutParams":
        threads = payload.get("threads")
        try:
            threads = int(threads) if threads not in (None, "") else None
        except (TypeError, ValueError) as exc:
            raise InvalidRequestError(f"threads must be a number, got {threads!r}") from exc
        return cls(
            repo=_required(payload, "repo"),
            folder=_required(payload, "folder"),
            include=_patterns(payload, "include"),
            exclude=_patterns(payload, "exclude"),
            build_number=_optional(payload, "build_number"),
            build_uri=_optional(payload, "build_uri"),
            build_properties=_string_map(payload, "build_properties"),
            strip_snapshot_timestamps=_flag(payload, "strip_snapshot_timestamps", True),
            disable_checksum_uploads=_flag(payload, "disable_checksum_uploads", False),
            threads=max(1, threads) if threads is not None else None,
            sign=_flag(payload, "sign", False),
            artifact_set=[ArtifactSet.from_payload(item) for item in payload.get("artifact_set") or []],
        )


@dataclass
class OutRequest:
    source: Source
    params: OutParams

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "OutRequest":
        return cls(
            source=Source.from_payload(_section(payload, "source")),
            params=OutParams.from_payload(_section(payload, "params")),
        )


@dataclass
class CheckResponse:
    versions: List[Version] = field(default_factory=list)

    def as_dict(self) -> List[Dict[str, str]]:
        return [version.as_dict() for version in self.versions]


@dataclass
class InResponse:
    version: Version
    metadata: List[Dict[str, str]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {"version": self.version.as_dict(), "metadata": list(self.metadata)}


@dataclass
class OutResponse:
    version: Version

    def as_dict(self) -> Dict[str, Any]:
        return {"version": self.version.as_dict()}
