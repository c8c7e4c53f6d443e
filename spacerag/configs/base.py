"""
Base configuration settings.

Process-wide options read by the aggregated Settings: deployment
environment and log level. Concern-specific settings classes carry
their own env_prefix and subclass pydantic-settings directly.

Dependencies: pydantic_settings
System role: Root of the settings tree
"""

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Unprefixed process settings (ENVIRONMENT, LOG_LEVEL)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment, reported at startup",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for configure_logging",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level
