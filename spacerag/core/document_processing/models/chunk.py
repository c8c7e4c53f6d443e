"""
Chunk domain model for document processing pipeline.

Represents one offset-tracked slice of a document's text before it is
persisted.

Dependencies: pydantic
System role: Data structure for chunker output
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Chunk of source text with its character span."""

    content: str = Field(description="Chunk text content")
    index: int = Field(ge=0, description="0-based ordinal in document order")
    start_offset: int = Field(ge=0, description="Start position in the source text")
    end_offset: int = Field(description="End position (exclusive) in the source text")
    token_count: int = Field(ge=0, description="Heuristic token estimate")
    metadata: dict = Field(default_factory=dict, description="Chunk metadata (page numbers)")
