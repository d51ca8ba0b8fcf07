"""Maven coordinates derived from repository layout paths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from artifactory_resource.exceptions import MalformedPathError

SNAPSHOT = "SNAPSHOT"
SNAPSHOT_SUFFIX = "-" + SNAPSHOT

FOLDER_PATTERN = re.compile(r"(.*)/(.*)/(.*)/(.*)")
TIMESTAMP_CLASSIFIER_PATTERN = re.compile(r"^([0-9]{8}.[0-9]{6})-([0-9]+)(.*)$")
TIMESTAMP_VERSION_PATTERN = re.compile(r"^(.*)-([0-9]{8}.[0-9]{6})-([0-9]+)$")


class MavenVersionType(str, Enum):
    """Kinds of on-disk Maven version."""

    FIXED = "fixed"
    SNAPSHOT = "snapshot"
    # alias of SNAPSHOT, not a separate member
    REGULAR_SNAPSHOT = SNAPSHOT
    TIMESTAMP_SNAPSHOT = "timestamp-snapshot"

    @classmethod
    def from_version(cls, version: str) -> "MavenVersionType":
        """Classify ``1.0.0.RELEASE``, ``1.0.0.BUILD-SNAPSHOT`` or ``1.0.0.BUILD-20171005.194031-1``."""
        if not version:
            raise ValueError("Version must not be empty")
        if version.upper().endswith(SNAPSHOT):
            return cls.REGULAR_SNAPSHOT
        if TIMESTAMP_VERSION_PATTERN.match(version):
            return cls.TIMESTAMP_SNAPSHOT
        return cls.FIXED


@dataclass(frozen=True)
class MavenCoordinates:
    """Coordinates of a single file in a Maven repository layout.

    ``version`` is the declared folder version (``1.0.0-SNAPSHOT``) while
    ``snapshot_version`` is the version token used in the file name, which may
    carry a build timestamp (``1.0.0-20171005.194031-1``).
    """

    group_id: str
    artifact_id: str
    version: str
    classifier: str
    extension: str
    snapshot_version: str

    @property
    def version_type(self) -> MavenVersionType:
        return MavenVersionType.from_version(self.snapshot_version)

    @property
    def is_snapshot_version(self) -> bool:
        return self.version_type is not MavenVersionType.FIXED

    @property
    def sort_key(self) -> tuple:
        return (self.group_id, self.artifact_id, self.version, self.extension, self.classifier)

    def __lt__(self, other: "MavenCoordinates") -> bool:
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return ":".join(
            (self.group_id, self.artifact_id, self.version, self.classifier, self.extension)
        )

    @classmethod
    def from_path(cls, path: str) -> "MavenCoordinates":
        """Parse ``group/artifact/version/filename`` (leading ``/`` optional)."""
        relative = path[1:] if path.startswith("/") else path
        match = FOLDER_PATTERN.fullmatch(relative)
        if not match:
            raise MalformedPathError(path, "path does not match folder pattern")
        group_id = match.group(1).replace("/", ".")
        artifact_id = match.group(2)
        version = match.group(3)
        name = match.group(4)
        root_version = version[: -len(SNAPSHOT_SUFFIX)] if version.endswith(SNAPSHOT_SUFFIX) else version
        if not name.startswith(artifact_id):
            raise MalformedPathError(
                path, f"name '{name}' does not start with artifact ID '{artifact_id}'"
            )
        remainder = name[len(artifact_id) + 1 :]
        if "." not in remainder:
            raise MalformedPathError(path, f"name '{name}' has no extension")
        snapshot_version_and_classifier, _, extension = remainder.rpartition(".")

        classifier = snapshot_version_and_classifier
        if classifier.startswith(root_version):
            classifier = _strip_dash(classifier[len(root_version) :])
        timestamp_match = TIMESTAMP_CLASSIFIER_PATTERN.match(classifier)
        if timestamp_match:
            classifier = _strip_dash(timestamp_match.group(3))
        if classifier.startswith(SNAPSHOT):
            classifier = _strip_dash(classifier[len(SNAPSHOT) :])

        if classifier:
            snapshot_version = snapshot_version_and_classifier[: -(len(classifier) + 1)]
        else:
            snapshot_version = snapshot_version_and_classifier
        if not snapshot_version:
            raise MalformedPathError(path, f"name '{name}' has no version")
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            classifier=classifier,
            extension=extension,
            snapshot_version=snapshot_version,
        )


def _strip_dash(value: str) -> str:
    return value[1:] if value.startswith("-") else value
