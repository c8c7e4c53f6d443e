"""
Document parsing API settings.

Dependencies: pydantic_settings
System role: External parser configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Unstructured partition API configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="UNSTRUCTURED_",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(
        default="https://api.unstructured.io/general/v0/general",
        description="Partition endpoint",
    )
    api_key: str | None = Field(default=None, description="API key sent as unstructured-api-key")
    strategy: str = Field(default="auto", description="Partition strategy")
    timeout_seconds: float = Field(default=120.0, description="Request timeout")
