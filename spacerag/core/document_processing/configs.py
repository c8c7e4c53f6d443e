"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for chunking, embedding batches,
per-stage retry policies and the reconciliation schedule.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StageRetrySettings(BaseModel):
    """Retry knobs for a single stage."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0.0, description="Seconds before the first retry")
    max_delay: float = Field(default=10.0, ge=0.0, description="Cap on a single backoff wait")
    factor: float = Field(default=2.0, ge=1.0, description="Backoff multiplier per attempt")
    jitter: float = Field(default=1.0, ge=0.0, description="Upper bound of random extra seconds")


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DOC_PIPELINE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        ge=1,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap between consecutive chunks",
    )
    chars_per_token: int = Field(
        default=4,
        ge=1,
        description="Average characters per token for the token estimate",
    )

    # Embedding settings
    embedding_batch_size: int = Field(
        default=100,
        ge=1,
        description="Texts per embedding provider call",
    )
    embedding_batch_delay_seconds: float = Field(
        default=0.1,
        ge=0.0,
        description="Pause between embedding batches",
    )

    # Stage retry policies
    extract_retry: StageRetrySettings = Field(
        default_factory=lambda: StageRetrySettings(max_attempts=3, base_delay=1.0, max_delay=10.0)
    )
    chunk_retry: StageRetrySettings = Field(
        default_factory=lambda: StageRetrySettings(max_attempts=3, base_delay=1.0, max_delay=30.0)
    )
    embed_retry: StageRetrySettings = Field(
        default_factory=lambda: StageRetrySettings(max_attempts=5, base_delay=2.0, max_delay=120.0)
    )

    # Reconciliation
    sync_interval_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Interval for re-triggering UPLOADED documents (0 disables)",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "DocumentPipelineSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self

