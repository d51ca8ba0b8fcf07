"""``in``: download the artifacts of a build run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from artifactory_resource.modules.artifactory.domain import DeployedArtifact

from .check import ServerFactory
from .payload import InRequest, InResponse

BUILD_INFO_FILE = "build-info.json"


class InHandler:
    def __init__(self, server_factory: ServerFactory) -> None:
        self.server_factory = server_factory
        self.log = logging.getLogger(self.__class__.__name__)

    def handle(self, request: InRequest, destination: Path) -> InResponse:
        source = request.source
        params = request.params
        build_number = request.version.build_number
        destination = Path(destination)
        metadata: List[Dict[str, str]] = []
        with self.server_factory(source) as server:
            build_runs = server.build_runs(source.build_name, project=source.project, admin=source.admin)
            if params.download_artifacts:
                artifacts = build_runs.get_deployed_artifacts(build_number)
                self.log.info("Downloading build %s artifacts from %s", build_number, source.uri)
                for repo, items in _group_by_repo(artifacts).items():
                    repository = server.repository(repo)
                    for artifact in items:
                        self.log.info("Downloading %s from %s", artifact.full_path, repo)
                        repository.download(artifact, destination, params.download_checksums)
                metadata.append({"name": "artifacts", "value": str(len(artifacts))})
            if params.save_build_info:
                target = destination / BUILD_INFO_FILE
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(build_runs.get_raw_build_info(build_number), encoding="utf-8")
                self.log.debug("Saved build info to %s", target)
        return InResponse(request.version, metadata)


def _group_by_repo(artifacts: List[DeployedArtifact]) -> Dict[str, List[DeployedArtifact]]:
    grouped: Dict[str, List[DeployedArtifact]] = {}
    for artifact in artifacts:
        grouped.setdefault(artifact.repo, []).append(artifact)
    return grouped
