from .coordinates import MavenCoordinates, MavenVersionType
from .build_modules import MavenBuildModulesGenerator

__all__ = [
    "MavenCoordinates",
    "MavenVersionType",
    "MavenBuildModulesGenerator",
]
