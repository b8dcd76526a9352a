"""Readiness polling configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class WaitConfig(BaseSettings):
    """Defaults applied to wait strategies that don't set their own."""

    wait_timeout_seconds: float = Field(default=60.0, gt=0, le=3600)
    wait_poll_interval_seconds: float = Field(default=0.5, gt=0, le=60)
    wait_retries: int = Field(default=5, ge=1, le=1000)
    wait_http_request_timeout: float = Field(default=5.0, gt=0, le=300)

    class Config:
        env_prefix = ""
        extra = "ignore"
