"""Error taxonomy shared by the publishing and retrieval engine."""

from __future__ import annotations

from typing import Optional


class ArtifactoryResourceError(RuntimeError):
    """Base class for all errors raised by this package."""


class InvalidRequestError(ArtifactoryResourceError, ValueError):
    """Raised when a request payload is missing a required value."""


class MalformedPathError(ArtifactoryResourceError):
    """Raised when Maven coordinates cannot be derived from a path."""

    def __init__(self, path: str, reason: str = "") -> None:
        message = f"Unable to parse maven coordinates from path '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class InvalidChecksumError(ArtifactoryResourceError, ValueError):
    """Raised when a checksum value has the wrong shape for its algorithm."""


class TransientTransferError(ArtifactoryResourceError):
    """Socket level failure talking to the server."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Transfer to {url} failed: {message}")
        self.url = url


class ServerResponseError(ArtifactoryResourceError):
    """Non-2xx response from the server."""

    def __init__(self, status_code: int, url: str, body: str = "") -> None:
        message = f"HTTP {status_code} from {url}"
        if body:
            message = f"{message}: {body[:500]}"
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class FlakyServerResponseError(ServerResponseError):
    """A status the server is known to return for transient conditions."""


class FatalServerResponseError(ServerResponseError):
    """Any other non-2xx status; never retried."""


class ArtifactDeployError(ArtifactoryResourceError):
    """Terminal failure deploying a single artifact."""

    def __init__(self, path: str, sha1: Optional[str], md5: Optional[str], cause: Exception) -> None:
        super().__init__(f"Error deploying artifact {path} with checksums {sha1}/{md5}: {cause}")
        self.path = path
        self.sha1 = sha1
        self.md5 = md5


class InputTimeoutError(ArtifactoryResourceError, TimeoutError):
    """Raised when no request arrives on the input stream in time."""
