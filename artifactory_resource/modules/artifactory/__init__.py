from .batch import BatchDeployer
from .build_runs import ArtifactoryBuildRuns, ListBuildRunsStrategy, SearchBuildRunsStrategy
from .repository import CHECKSUM_THRESHOLD, ArtifactoryRepository
from .retry import RetryPolicy, is_retryable
from .server import ArtifactoryServer

__all__ = [
    "BatchDeployer",
    "ArtifactoryBuildRuns",
    "ListBuildRunsStrategy",
    "SearchBuildRunsStrategy",
    "CHECKSUM_THRESHOLD",
    "ArtifactoryRepository",
    "RetryPolicy",
    "is_retryable",
    "ArtifactoryServer",
]
