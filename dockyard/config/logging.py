"""Logging configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    """structlog output settings."""

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", pattern="^(json|console)$")

    class Config:
        env_prefix = ""
        extra = "ignore"
