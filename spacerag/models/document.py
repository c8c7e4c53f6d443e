"""
Document domain models and schemas.

Request/response schemas for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from spacerag.boundary.db.models import DocumentStatus, DocumentType


class FileRef(BaseModel):
    """Reference to a file already placed in blob storage."""

    key: str = Field(description="Blob storage key")
    url: str = Field(description="Public or storage URL")
    size: int | None = Field(default=None, ge=0, description="Size in bytes")
    mime_type: str = Field(description="MIME type of the stored file")


class DocumentCreateRequest(BaseModel):
    """Request schema for creating a document from text or an uploaded file."""

    title: str = Field(min_length=1, max_length=500)
    document_type: DocumentType = Field(default=DocumentType.FILE)
    content: str | None = Field(default=None, description="Inline text (crawled pages, extension captures)")
    file: FileRef | None = Field(default=None, description="Previously uploaded file")
    metadata: dict[str, Any] = Field(default_factory=dict)


class UploadedFileResponse(FileRef):
    """Result of a raw file upload."""

    presigned_url: str = Field(description="Time-limited download URL")
    expires_in: int = Field(description="Presigned URL lifetime in seconds")


class ProcessingErrorInfo(BaseModel):
    """Last pipeline failure."""

    stage: str
    message: str
    timestamp: str


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    space_id: uuid.UUID
    title: str
    document_type: DocumentType
    processing_status: DocumentStatus
    processing_error: ProcessingErrorInfo | None = None
    chunk_count: int | None = None
    file_url: str | None = None
    file_mime_type: str | None = None
    file_size: int | None = None
    created_at: datetime
    updated_at: datetime


class DocumentCreatedResponse(BaseModel):
    id: uuid.UUID


class SyncResponse(BaseModel):
    """Documents re-triggered by a sync pass."""

    triggered: list[uuid.UUID]
