"""Configuration management for dockyard.

A flat Settings class reads environment variables (and an optional .env
file), and exposes the values as logical groups.

Usage:
    from dockyard.config import settings

    # Access grouped settings
    settings.docker.api_prefix
    settings.wait.wait_poll_interval_seconds

    # Or the flat fields directly
    settings.docker_api_version
    settings.wait_timeout_seconds
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Import grouped configurations
from .docker import DockerConfig
from .logging import LoggingConfig
from .wait import WaitConfig


class Settings(BaseSettings):
    """dockyard settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Docker daemon
    docker_host: Optional[str] = Field(
        default=None,
        description="Daemon address (unix:///path, tcp://host:port); auto-detected when unset",
    )
    docker_api_version: str = Field(default="1.44")
    docker_request_timeout: float = Field(
        default=30.0, gt=0, le=600, description="Per-request timeout for daemon calls"
    )
    docker_pull_timeout: float = Field(
        default=300.0, gt=0, le=3600, description="Timeout for image pulls"
    )

    # Container lifecycle
    container_stop_timeout: int = Field(
        default=10,
        ge=0,
        le=600,
        description="Grace period in seconds before the daemon kills a stopping container",
    )
    container_always_pull: bool = Field(
        default=False, description="Pull images even when already present locally"
    )

    # Wait strategies
    wait_timeout_seconds: float = Field(default=60.0, gt=0, le=3600)
    wait_poll_interval_seconds: float = Field(default=0.5, gt=0, le=60)
    wait_retries: int = Field(default=5, ge=1, le=1000)
    wait_http_request_timeout: float = Field(default=5.0, gt=0, le=300)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("docker_api_version")
    @classmethod
    def normalize_api_version(cls, v: str) -> str:
        """Accept both "1.44" and "v1.44"."""
        return v.strip().lstrip("vV")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    # ========================================================================
    # GROUPED CONFIG ACCESS
    # ========================================================================

    @property
    def docker(self) -> DockerConfig:
        """Access Docker daemon configuration group."""
        return DockerConfig(
            docker_host=self.docker_host,
            docker_api_version=self.docker_api_version,
            docker_request_timeout=self.docker_request_timeout,
            docker_pull_timeout=self.docker_pull_timeout,
            container_stop_timeout=self.container_stop_timeout,
            container_always_pull=self.container_always_pull,
        )

    @property
    def wait(self) -> WaitConfig:
        """Access wait strategy configuration group."""
        return WaitConfig(
            wait_timeout_seconds=self.wait_timeout_seconds,
            wait_poll_interval_seconds=self.wait_poll_interval_seconds,
            wait_retries=self.wait_retries,
            wait_http_request_timeout=self.wait_http_request_timeout,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(log_level=self.log_level, log_format=self.log_format)


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    # Grouped configs
    "DockerConfig",
    "WaitConfig",
    "LoggingConfig",
]
