"""Runtime configuration for the Artifactory resource."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values mapped from ``ARTIFACTORY_RESOURCE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARTIFACTORY_RESOURCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HTTP transport
    http_timeout: float = Field(60.0, gt=0)

    # Deploy behaviour
    deploy_threads: int = Field(1, ge=1)
    deploy_retry_attempts: int = Field(3, ge=1)
    deploy_retry_delay: float = Field(5.0, ge=0)
    checksum_threshold: int = Field(10 * 1024, ge=0)

    # Build info
    ci_agent_name: str = "Concourse"
    ci_agent_version: Optional[str] = None

    # Command input
    input_timeout: float = Field(1.0, gt=0)

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
