"""Docker daemon connection configuration."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Docker Engine API connection settings."""

    docker_host: Optional[str] = Field(default=None)
    docker_api_version: str = Field(default="1.44")
    docker_request_timeout: float = Field(default=30.0, gt=0, le=600)
    docker_pull_timeout: float = Field(default=300.0, gt=0, le=3600)
    container_stop_timeout: int = Field(default=10, ge=0, le=600)
    container_always_pull: bool = Field(default=False)

    @property
    def api_prefix(self) -> str:
        """Path prefix for every Engine API request."""
        return f"/v{self.docker_api_version.lstrip('v')}"

    class Config:
        env_prefix = ""
        extra = "ignore"
