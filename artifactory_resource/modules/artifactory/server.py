"""Entry point to an Artifactory server."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from artifactory_resource.modules.artifactory.build_runs import ArtifactoryBuildRuns
from artifactory_resource.modules.artifactory.repository import CHECKSUM_THRESHOLD, ArtifactoryRepository
from artifactory_resource.modules.artifactory.retry import RetryPolicy


class ArtifactoryServer:
    """Hands out repository and build-run clients sharing one HTTP connection pool."""

    def __init__(
        self,
        uri: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
        retry_policy: Optional[RetryPolicy] = None,
        checksum_threshold: int = CHECKSUM_THRESHOLD,
    ) -> None:
        if not uri:
            raise ValueError("URI must not be empty")
        self.uri = uri.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy()
        self.checksum_threshold = checksum_threshold
        self.log = logging.getLogger(self.__class__.__name__)
        auth = None
        if username and password:
            auth = (username, password)
        self._owns_client = client is None
        self._client = client or httpx.Client(auth=auth, timeout=timeout)

    def repository(self, name: str) -> ArtifactoryRepository:
        return ArtifactoryRepository(
            self._client,
            self.uri,
            name,
            retry_policy=self.retry_policy,
            checksum_threshold=self.checksum_threshold,
        )

    def build_runs(
        self,
        name: str,
        project: Optional[str] = None,
        limit: Optional[int] = None,
        admin: bool = False,
    ) -> ArtifactoryBuildRuns:
        self.log.debug("Using build runs of %s (admin=%s)", name, admin)
        return ArtifactoryBuildRuns(self._client, self.uri, name, project=project, limit=limit, admin=admin)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ArtifactoryServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
