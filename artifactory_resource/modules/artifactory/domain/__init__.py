from .build import (
    BuildArtifact,
    BuildInfo,
    BuildModule,
    BuildNumber,
    BuildRun,
    ContinuousIntegrationAgent,
    format_date,
    parse_date,
    to_utc,
)
from .artifacts import (
    DeployableArtifact,
    DeployableBytesArtifact,
    DeployableFileArtifact,
    DeployedArtifact,
    DeployOption,
    calculate_path,
)

__all__ = [
    "BuildArtifact",
    "BuildInfo",
    "BuildModule",
    "BuildNumber",
    "BuildRun",
    "ContinuousIntegrationAgent",
    "format_date",
    "parse_date",
    "to_utc",
    "DeployableArtifact",
    "DeployableBytesArtifact",
    "DeployableFileArtifact",
    "DeployedArtifact",
    "DeployOption",
    "calculate_path",
]
