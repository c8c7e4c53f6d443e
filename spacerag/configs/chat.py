"""
Conversation and answer synthesis settings.

Dependencies: pydantic_settings
System role: Chat flow configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChatSettings(BaseSettings):
    """Settings for history windows, titles and citations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHAT_",
        case_sensitive=False,
        extra="ignore",
    )

    history_exchanges: int = Field(
        default=5,
        ge=0,
        description="Prior question/answer pairs included in the prompt",
    )
    title_max_chars: int = Field(default=100, description="Derived conversation title length")
    excerpt_chars: int = Field(default=200, description="Citation excerpt length")

    rate_limit_enabled: bool = Field(default=False, description="Enable per-user rate limiting")
    rate_limit_requests: int = Field(default=20, description="Requests allowed per window")
    rate_limit_window_seconds: int = Field(default=60, description="Rate limit window")
