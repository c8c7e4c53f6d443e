"""
Language model and embedding provider settings.

Dependencies: pydantic, pydantic_settings
System role: Model capability configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Chat and embedding provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    chat_provider: str = Field(default="google", description="'google' or 'bedrock'")
    chat_model: str = Field(default="gemini-2.5-flash", description="Chat model identifier")
    temperature: float = Field(default=0.0, description="Sampling temperature")
    chat_timeout_seconds: float = Field(default=60.0, description="Timeout for one completion")

    embedding_provider: str = Field(default="google", description="'google' or 'bedrock'")
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model identifier",
    )
    embedding_dimension: int = Field(
        default=1536,
        description="Pipeline-wide embedding dimension",
    )
    embedding_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for one embedding call",
    )

    region: str = Field(default="us-east-1", description="AWS region for Bedrock providers")
    google_api_key: str | None = Field(default=None, description="Google AI API key")
