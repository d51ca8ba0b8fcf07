"""``out``: deploy a folder of artifacts and register the build run."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from itertools import chain
from pathlib import Path
from typing import Dict, List, Optional

from artifactory_resource.exceptions import InvalidRequestError
from artifactory_resource.modules.artifactory import ArtifactoryRepository, BatchDeployer
from artifactory_resource.modules.artifactory.domain import (
    BuildNumber,
    ContinuousIntegrationAgent,
    DeployableArtifact,
    DeployableFileArtifact,
    DeployOption,
    calculate_path,
)
from artifactory_resource.modules.files import DirectoryScanner, FileSet, PathFilter, is_checksum_file
from artifactory_resource.modules.files.fileset import Category
from artifactory_resource.modules.maven import MavenBuildModulesGenerator, MavenCoordinates, MavenVersionType

from .build_number import BuildNumberGenerator
from .check import ServerFactory
from .payload import OutParams, OutRequest, OutResponse, Source, Version
from .signing import ArtifactSigner, sign_batches

log = logging.getLogger(__name__)


class OutHandler:
    def __init__(
        self,
        server_factory: ServerFactory,
        build_number_generator: Optional[BuildNumberGenerator] = None,
        scanner: Optional[DirectoryScanner] = None,
        modules_generator: Optional[MavenBuildModulesGenerator] = None,
        signer: Optional[ArtifactSigner] = None,
        agent: Optional[ContinuousIntegrationAgent] = None,
        threads: int = 1,
    ) -> None:
        self.server_factory = server_factory
        self.build_number_generator = build_number_generator or BuildNumberGenerator()
        self.scanner = scanner or DirectoryScanner()
        self.modules_generator = modules_generator or MavenBuildModulesGenerator()
        self.signer = signer
        self.agent = agent or ContinuousIntegrationAgent()
        self.threads = threads
        self.log = logging.getLogger(self.__class__.__name__)

    def handle(self, request: OutRequest, directory: Path) -> OutResponse:
        source = request.source
        params = request.params
        started = datetime.now(timezone.utc)
        build_number = self._get_build_number(source, params)
        batches = self._get_batches(build_number, source, params, Path(directory))
        if params.sign:
            if self.signer is None:
                raise InvalidRequestError("Signing requested but no signer is configured")
            batches = sign_batches(self.signer, batches)
        artifacts = list(chain.from_iterable(batches.values()))
        self.log.info(
            "Deploying %d artifacts to %s as build %s", len(artifacts), source.uri, build_number
        )
        with self.server_factory(source) as server:
            repository = server.repository(params.repo)
            options = (DeployOption.DISABLE_CHECKSUM_UPLOADS,) if params.disable_checksum_uploads else ()
            deployer: BatchDeployer[DeployableArtifact] = BatchDeployer(params.threads or self.threads)
            deployer.deploy_all(batches, lambda artifact: self._deploy(repository, artifact, options))
            modules = self.modules_generator.get_build_modules(artifacts)
            server.build_runs(source.build_name, project=source.project).add(
                build_number,
                build_uri=params.build_uri,
                agent=self.agent,
                started=started,
                modules=modules,
                properties=params.build_properties,
            )
        return OutResponse(Version(build_number))

    def _get_build_number(self, source: Source, params: OutParams) -> str:
        if params.build_number:
            return params.build_number
        build_number = BuildNumber.of(self.build_number_generator.generate(), source.build_number_prefix)
        self.log.debug("Generated build number %s", build_number)
        return str(build_number)

    def _get_batches(
        self, build_number: str, source: Source, params: OutParams, directory: Path
    ) -> Dict[Category, List[DeployableArtifact]]:
        root = directory / params.folder
        self.log.debug("Getting deployable artifacts from %s", root)
        files = FileSet.of(self.scanner.scan(root, params.include, params.exclude))
        files = files.filter(lambda file: not is_checksum_file(file.name))
        if params.strip_snapshot_timestamps:
            files = files.filter(lambda file: file.name.lower() != "maven-metadata.xml")
        if not files:
            raise InvalidRequestError(f"No artifacts found to deploy in {root}")
        return {
            category: [self._get_artifact(root, file, build_number, source, params) for file in batch]
            for category, batch in files.batched_by_category().items()
        }

    def _get_artifact(
        self, root: Path, file: Path, build_number: str, source: Source, params: OutParams
    ) -> DeployableArtifact:
        path = calculate_path(root, file)
        properties: Dict[str, str] = {}
        for artifact_set in params.artifact_set:
            if PathFilter(artifact_set.include, artifact_set.exclude).is_match(path):
                self.log.debug("Artifact set matched %s, adding properties %s", path, artifact_set.properties)
                properties.update(artifact_set.properties)
        properties["build.name"] = source.build_name
        properties["build.number"] = build_number
        if params.strip_snapshot_timestamps:
            path = strip_snapshot_timestamp(path)
        return DeployableFileArtifact(path, file, properties)

    def _deploy(
        self, repository: ArtifactoryRepository, artifact: DeployableArtifact, options: tuple
    ) -> None:
        checksums = artifact.checksums
        self.log.info("Deploying %s %s (%s/%s)", artifact.path, artifact.properties, checksums.sha1, checksums.md5)
        repository.deploy(artifact, *options)


def strip_snapshot_timestamp(path: str) -> str:
    """Rewrite a timestamped snapshot path to its ``-SNAPSHOT`` form."""
    coordinates = MavenCoordinates.from_path(path)
    if coordinates.version_type is not MavenVersionType.TIMESTAMP_SNAPSHOT:
        return path
    stripped = path.replace(coordinates.snapshot_version, coordinates.version)
    log.debug("Stripped timestamp version %s to %s", path, stripped)
    return stripped
