"""Build-info module generation for Maven layout artifacts."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from artifactory_resource.exceptions import MalformedPathError
from artifactory_resource.modules.artifactory.domain import BuildArtifact, BuildModule, DeployableArtifact
from artifactory_resource.modules.maven.coordinates import FOLDER_PATTERN

log = logging.getLogger(__name__)

SUFFIX_TYPES = {"-sources.jar": "java-source-jar"}
IGNORED_EXTENSIONS = frozenset({"md5", "sha"})


class MavenBuildModulesGenerator:
    """Group deployed artifacts into ``group:artifact:version`` build modules."""

    def get_build_modules(self, artifacts: Iterable[DeployableArtifact]) -> List[BuildModule]:
        grouped: Dict[str, List[BuildArtifact]] = {}
        for artifact in artifacts:
            try:
                module_id, filename = self._split(artifact.path)
            except MalformedPathError:
                log.debug("Skipping %s, not in a maven layout", artifact.path)
                continue
            build_artifact = self._build_artifact(artifact, filename)
            if build_artifact is not None:
                grouped.setdefault(module_id, []).append(build_artifact)
        return [BuildModule(id=module_id, artifacts=items) for module_id, items in grouped.items()]

    def _split(self, path: str) -> tuple[str, str]:
        match = FOLDER_PATTERN.fullmatch(path[1:] if path.startswith("/") else path)
        if not match:
            raise MalformedPathError(path, "path does not match folder pattern")
        group_id = match.group(1).replace("/", ".")
        return f"{group_id}:{match.group(2)}:{match.group(3)}", match.group(4)

    def _build_artifact(self, artifact: DeployableArtifact, filename: str) -> Optional[BuildArtifact]:
        artifact_type = self._get_type(filename)
        if artifact_type is None:
            return None
        checksums = artifact.checksums
        return BuildArtifact(type=artifact_type, sha1=checksums.sha1, md5=checksums.md5, name=filename)

    def _get_type(self, name: str) -> Optional[str]:
        lower = name.lower()
        for suffix, artifact_type in SUFFIX_TYPES.items():
            if lower.endswith(suffix):
                return artifact_type
        if "." not in lower:
            return None
        extension = lower.rpartition(".")[2]
        if extension in IGNORED_EXTENSIONS:
            return None
        return extension
