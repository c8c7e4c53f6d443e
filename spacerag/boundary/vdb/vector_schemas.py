"""
Vector search schemas.

Pydantic models for similarity index queries and results.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from spacerag.configs.vector_store import MAX_TOP_K


class VectorQuery(BaseModel):
    """Query parameters for a scoped similarity search."""

    embedding: list[float] = Field(description="Query embedding vector")
    space_id: uuid.UUID = Field(description="Only chunks of documents in this space")
    top_k: int = Field(default=5, description="Number of results to return", ge=1, le=MAX_TOP_K)
    similarity_threshold: float = Field(
        default=0.7,
        description="Minimum similarity score (inclusive)",
        ge=0.0,
        le=1.0,
    )


class VectorSearchResult(BaseModel):
    """Single result from a similarity search."""

    chunk_id: uuid.UUID
    document_id: uuid.UUID
    document_title: str
    content: str
    chunk_index: int
    similarity: float = Field(description="1 - cosine distance")
    metadata: dict[str, Any] = Field(default_factory=dict)
