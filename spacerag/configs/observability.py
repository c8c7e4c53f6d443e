"""
Observability configuration settings.

Settings for Langfuse tracing of model calls.

Dependencies: pydantic_settings
System role: Observability configuration for tracing and logging
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Observability configuration for Langfuse."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LANGFUSE_",
        case_sensitive=False,
        extra="ignore",
    )

    public_key: str | None = Field(default=None, description="Langfuse public key")
    secret_key: str | None = Field(default=None, description="Langfuse secret key")
    host: str = Field(default="http://localhost:3000", description="Langfuse server host URL")
    enable_tracing: bool = Field(default=False, description="Enable Langfuse tracing")

    @property
    def tracing_active(self) -> bool:
        """Tracing runs only when enabled and both keys are present."""
        return self.enable_tracing and bool(self.public_key and self.secret_key)
