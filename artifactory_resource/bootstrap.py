"""Wiring of the command handlers around shared settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TextIO

import httpx

from .logging_config import configure_logging
from .modules.artifactory import ArtifactoryServer, RetryPolicy
from .modules.artifactory.domain import ContinuousIntegrationAgent
from .modules.command import (
    ArtifactSigner,
    BuildNumberGenerator,
    CheckHandler,
    InHandler,
    OutHandler,
    Source,
    read_request,
)
from .modules.files import DirectoryScanner
from .modules.maven import MavenBuildModulesGenerator
from .settings import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    client: Optional[httpx.Client] = None
    signer: Optional[ArtifactSigner] = None
    scanner: DirectoryScanner = field(init=False)
    build_number_generator: BuildNumberGenerator = field(init=False)
    modules_generator: MavenBuildModulesGenerator = field(init=False)
    check_handler: CheckHandler = field(init=False)
    in_handler: InHandler = field(init=False)
    out_handler: OutHandler = field(init=False)

    def __post_init__(self) -> None:
        self.scanner = DirectoryScanner()
        self.build_number_generator = BuildNumberGenerator()
        self.modules_generator = MavenBuildModulesGenerator()
        self.check_handler = CheckHandler(self.server)
        self.in_handler = InHandler(self.server)
        self.out_handler = OutHandler(
            self.server,
            build_number_generator=self.build_number_generator,
            scanner=self.scanner,
            modules_generator=self.modules_generator,
            signer=self.signer,
            agent=ContinuousIntegrationAgent(self.settings.ci_agent_name, self.settings.ci_agent_version),
            threads=self.settings.deploy_threads,
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.settings.deploy_retry_attempts,
            delay=self.settings.deploy_retry_delay,
        )

    def read_payload(self, stream: TextIO) -> Dict[str, Any]:
        return read_request(stream, timeout=self.settings.input_timeout)

    def server(self, source: Source) -> ArtifactoryServer:
        log.debug("Using artifactory server %s", source.uri)
        return ArtifactoryServer(
            source.uri,
            source.username,
            source.password,
            timeout=self.settings.http_timeout,
            client=self.client,
            retry_policy=self.retry_policy(),
            checksum_threshold=self.settings.checksum_threshold,
        )


def create_container(settings: Optional[Settings] = None, **kwargs) -> ServiceContainer:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    return ServiceContainer(settings, **kwargs)
