"""Deploy to and download from a single Artifactory repository."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

import httpx

from artifactory_resource.exceptions import (
    ArtifactDeployError,
    ArtifactoryResourceError,
    ServerResponseError,
    TransientTransferError,
)
from artifactory_resource.modules.artifactory.domain import DeployableArtifact, DeployedArtifact, DeployOption
from artifactory_resource.modules.artifactory.http import encode_path, join_url, raise_for_status, send
from artifactory_resource.modules.artifactory.retry import RetryPolicy
from artifactory_resource.modules.files.checksum import CHUNK_SIZE, Checksum, Checksums, is_checksum_file

CHECKSUM_THRESHOLD = 10 * 1024


class ArtifactoryRepository:
    """Client for one repository on an Artifactory server.

    Larger artifacts are first deployed by checksum only, letting the server
    reuse content it already holds. When that is refused (a client error or a
    dropped connection) the content is uploaded, retrying on flaky responses.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        repository_name: str,
        retry_policy: Optional[RetryPolicy] = None,
        checksum_threshold: int = CHECKSUM_THRESHOLD,
    ) -> None:
        if not repository_name:
            raise ValueError("Repository name must not be empty")
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.repository_name = repository_name
        self.retry_policy = retry_policy or RetryPolicy()
        self.checksum_threshold = checksum_threshold
        self.log = logging.getLogger(self.__class__.__name__)

    def deploy(self, artifact: DeployableArtifact, *options: DeployOption) -> None:
        checksums = artifact.checksums
        try:
            if artifact.size <= self.checksum_threshold or DeployOption.DISABLE_CHECKSUM_UPLOADS in options:
                self._deploy_using_content(artifact, checksums)
                return
            try:
                self._deploy_using_checksum(artifact, checksums)
            except ArtifactoryResourceError as exc:
                if not _can_fall_back(exc):
                    raise
                self.log.debug("Checksum deploy of %s failed (%s), uploading content", artifact.path, exc)
                self._deploy_using_content(artifact, checksums)
        except ArtifactoryResourceError as exc:
            raise ArtifactDeployError(artifact.path, checksums.sha1, checksums.md5, exc) from exc

    def _deploy_using_checksum(self, artifact: DeployableArtifact, checksums: Checksums) -> None:
        url = self._deploy_url(artifact)
        headers = self._deploy_headers(checksums)
        headers["X-Checksum-Deploy"] = "true"
        headers["Content-Length"] = "0"
        self.log.debug("Deploying %s using checksum %s", artifact.path, checksums.sha1)
        send(self._client, "PUT", url, headers=headers)

    def _deploy_using_content(self, artifact: DeployableArtifact, checksums: Checksums) -> None:
        url = self._deploy_url(artifact)

        def upload() -> None:
            headers = self._deploy_headers(checksums)
            headers["Content-Length"] = str(artifact.size)
            send(self._client, "PUT", url, headers=headers, content=_iter_content(artifact))

        self.log.debug("Deploying %s using content (%d bytes)", artifact.path, artifact.size)
        self.retry_policy.run(upload, f"upload of {artifact.path}")

    def _deploy_url(self, artifact: DeployableArtifact) -> str:
        path = self.repository_name + artifact.path + build_matrix_params(artifact.properties)
        return f"{self.base_url}/{encode_path(path)}"

    @staticmethod
    def _deploy_headers(checksums: Checksums) -> Dict[str, str]:
        return {
            "Content-Type": "application/octet-stream",
            "X-Checksum-Sha1": checksums.sha1,
            "X-Checksum-Md5": checksums.md5,
        }

    def download(
        self,
        artifact: Union[str, DeployedArtifact],
        destination: Path,
        download_checksums: bool = True,
    ) -> Path:
        """Download ``artifact`` below ``destination``, keeping its repository path.

        Checksum companions (``.md5``, ``.sha1``) are fetched when available; a
        client error for a companion is logged and ignored.
        """
        path = artifact.full_path if isinstance(artifact, DeployedArtifact) else artifact
        path = (path or "").lstrip("/")
        if not path:
            raise ValueError("Path must not be empty")
        target = self._get_file(path, Path(destination))
        if download_checksums and not is_checksum_file(path):
            for checksum in Checksum:
                try:
                    self._get_file(path + checksum.file_extension, Path(destination))
                except ServerResponseError as exc:
                    if not exc.is_client_error:
                        raise
                    self.log.debug("No %s checksum for %s (%s)", checksum.name, path, exc.status_code)
        return target

    def _get_file(self, path: str, destination: Path) -> Path:
        url = join_url(self.base_url, f"{self.repository_name}/{path}")
        target = destination / path
        try:
            with self._client.stream("GET", url) as response:
                raise_for_status(response)
                target.parent.mkdir(parents=True, exist_ok=True)
                downloaded = 0
                with open(target, "wb") as fh:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        fh.write(chunk)
                        downloaded += len(chunk)
        except httpx.TransportError as exc:
            raise TransientTransferError(url, str(exc)) from exc
        self.log.info("Downloaded %s -> %s (%d bytes)", url, target, downloaded)
        return target


def build_matrix_params(properties: Optional[Mapping[str, str]]) -> str:
    return "".join(f";{key}={value}" for key, value in (properties or {}).items())


def _iter_content(artifact: DeployableArtifact) -> Iterator[bytes]:
    with artifact.open() as content:
        for chunk in iter(lambda: content.read(CHUNK_SIZE), b""):
            yield chunk


def _can_fall_back(error: BaseException) -> bool:
    if isinstance(error, ServerResponseError) and error.is_client_error:
        return True
    cause: Optional[BaseException] = error
    while cause is not None:
        if isinstance(cause, (TransientTransferError, httpx.TransportError)):
            return True
        cause = cause.__cause__ or cause.__context__
    return False
