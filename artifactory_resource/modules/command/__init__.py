from .build_number import BuildNumberGenerator
from .check import CheckHandler
from .fetch import InHandler
from .payload import (
    CheckRequest,
    CheckResponse,
    InRequest,
    InResponse,
    OutRequest,
    OutResponse,
    Source,
    Version,
)
from .publish import OutHandler, strip_snapshot_timestamp
from .signing import ArtifactSigner, sign_batches
from .system_input import read_request

__all__ = [
    "BuildNumberGenerator",
    "CheckHandler",
    "InHandler",
    "OutHandler",
    "CheckRequest",
    "CheckResponse",
    "InRequest",
    "InResponse",
    "OutRequest",
    "OutResponse",
    "Source",
    "Version",
    "strip_snapshot_timestamp",
    "ArtifactSigner",
    "sign_batches",
    "read_request",
]
