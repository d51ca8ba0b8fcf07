"""Add detached signatures to the artifacts of a publish."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Protocol, Sequence

from artifactory_resource.exceptions import InvalidRequestError
from artifactory_resource.modules.artifactory.domain import DeployableArtifact, DeployableBytesArtifact
from artifactory_resource.modules.files.fileset import Category

log = logging.getLogger(__name__)

SIGNATURE_EXTENSION = ".asc"


class ArtifactSigner(Protocol):
    """Produces an armored signature for some content."""

    def sign(self, content: bytes) -> bytes:  # pragma: no cover - interface
        ...


def sign_batches(
    signer: ArtifactSigner,
    batches: Mapping[Category, Sequence[DeployableArtifact]],
) -> Dict[Category, List[DeployableArtifact]]:
    """Return ``batches`` with a ``.asc`` signature batch for every artifact."""
    if batches.get(Category.SIGNATURE):
        raise InvalidRequestError("Files must not already be signed")
    signatures: List[DeployableArtifact] = []
    for artifacts in batches.values():
        for artifact in artifacts:
            with artifact.open() as content:
                signature = signer.sign(content.read())
            log.debug("Signed %s", artifact.path)
            signatures.append(
                DeployableBytesArtifact(artifact.path + SIGNATURE_EXTENSION, signature, artifact.properties)
            )
    signed = {category: list(artifacts) for category, artifacts in batches.items()}
    if signatures:
        signed[Category.SIGNATURE] = signatures
    return dict(sorted(signed.items(), key=lambda item: item[0].priority))
