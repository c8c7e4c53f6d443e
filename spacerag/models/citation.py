"""
Citation domain model.

Represents a citation to a source chunk for grounded answers.

Dependencies: pydantic
System role: Citation data structure
"""

import uuid

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Citation as returned with a fresh answer."""

    index: int = Field(ge=1, description="1-based number matching [n] in the answer")
    chunk_id: uuid.UUID
    document_id: uuid.UUID
    document_title: str
    relevance_score: float
    excerpt: str
    page_numbers: list[int] = Field(default_factory=list)


class CitationWithChunk(Citation):
    """Stored citation joined with its chunk."""

    id: uuid.UUID
    chunk_content: str
    chunk_index: int
