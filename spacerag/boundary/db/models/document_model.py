"""
Document ORM model.

Represents an ingested source with its pipeline status, last error and
chunk count. Tracks the lifecycle UPLOADED -> EXTRACTING -> CHUNKING ->
EMBEDDING -> READY, with ERROR reachable from any non-terminal state.

Dependencies: sqlalchemy, spacerag.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
import uuid
from typing import Any

from sqlalchemy import JSON, BigInteger, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spacerag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    UPLOADED: Accepted, waiting for (or reset before) the Extract stage
    EXTRACTING / CHUNKING / EMBEDDING: Stage in progress
    READY: Fully embedded, visible to retrieval
    ERROR: A stage failed for good; processing_error holds stage and message
    """

    UPLOADED = "uploaded"
    EXTRACTING = "extracting"
    CHUNKING = "chunking"
    EMBEDDING = "embedding"
    READY = "ready"
    ERROR = "error"


class DocumentType(str, enum.Enum):
    """Where the document came from."""

    FILE = "file"
    CRAWLED_URL = "crawled_url"
    EXTENSION = "extension"
    YOUTUBE_VIDEO = "youtube_video"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Attributes:
        space_id: Owning space (cascade delete)
        title: Display title used in prompts and citations
        document_type: Source type
        content: Raw text (uploaded text or extracted output)
        content_hash: Dedup key, unique per space
        file_url / file_key / file_size / file_mime_type: Blob reference for file uploads
        document_metadata: Free-form metadata (extraction stats, page spans)
        processing_status: Current pipeline state
        processing_error: {stage, message, timestamp} of the last failure
        chunk_count: Number of chunks written by the Chunk stage

    Relationships:
        space: Parent SpaceModel
        chunks: One-to-many with ChunkModel (cascade delete)
    """

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("space_id", "content_hash", name="uq_documents_space_content_hash"),
    )

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    document_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, native_enum=False),
        nullable=False,
        default=DocumentType.FILE,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    file_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    file_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    file_mime_type: Mapped[str | None] = mapped_column(String(255), nullable=True)

    document_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    processing_status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.UPLOADED,
        index=True,
    )
    processing_error: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    chunk_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    space = relationship("SpaceModel", back_populates="documents")
    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChunkModel.chunk_index",
    )

    def __repr__(self) -> str:
        return f"<DocumentModel(id={self.id}, title={self.title}, status={self.processing_status})>"
