"""
Vector store configuration settings.

Selects the similarity index implementation and the retrieval defaults.
top_k and similarity_threshold are tunable per corpus.

Dependencies: pydantic, pydantic_settings
System role: Vector retrieval configuration for RAG
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Upper bound shared with VectorQuery so a configured default is always a valid query.
MAX_TOP_K = 100


class VectorStoreSettings(BaseSettings):
    """Similarity index configuration (pgvector in Postgres, numpy for local runs)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="pgvector",
        description="Similarity index: 'pgvector' for Postgres, 'numpy' for in-process scoring",
    )
    top_k: int = Field(default=5, ge=1, le=MAX_TOP_K, description="Number of top results to retrieve")
    similarity_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum similarity score for retrieval (0.0-1.0)",
    )
