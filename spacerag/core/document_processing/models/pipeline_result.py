"""
Pipeline result models for document processing.

Dependencies: pydantic
System role: Return types for DocumentPipeline and its stages
"""

import uuid

from pydantic import BaseModel, Field


class ExtractionResult(BaseModel):
    """Outcome of the Extract stage."""

    text_length: int
    element_count: int
    page_count: int | None = None


class EmbeddingResult(BaseModel):
    """Outcome of the Embed stage."""

    embedded: int = 0
    skipped: int = 0
    short_circuited: bool = Field(
        default=False,
        description="All chunks already had vectors; no provider call was made",
    )


class PipelineResult(BaseModel):
    """Result of one document pipeline run."""

    document_id: uuid.UUID = Field(description="Document identifier")
    status: str = Field(description="Document status after the run")
    chunk_count: int | None = Field(default=None, description="Number of chunks persisted")
    failed_stage: str | None = Field(default=None, description="Stage that ended the run")
    error: str | None = Field(default=None, description="Failure message when failed_stage is set")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")

    @property
    def succeeded(self) -> bool:
        return self.failed_stage is None
