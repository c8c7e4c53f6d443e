"""
Chunk ORM model.

A bounded slice of a document's text with character offsets and an
optional embedding. Rows are deleted and recreated wholesale when a
document is rechunked.

Dependencies: sqlalchemy, pgvector, spacerag.boundary.db.base
System role: Chunk and embedding persistence
"""

import uuid
from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spacerag.boundary.db.base import Base, EmbeddingVector, TimestampMixin, UUIDMixin


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Attributes:
        document_id: Owning document (cascade delete)
        content: Chunk text
        chunk_index: 0-based ordinal in document order
        start_offset / end_offset: Character span in the document content
        token_count: Heuristic token estimate
        embedding: Fixed-dimension vector, NULL until the Embed stage writes it
        chunk_metadata: Free-form metadata (page numbers)
    """

    __tablename__ = "chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_chunks_document_index"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    start_offset: Mapped[int] = mapped_column(Integer, nullable=False)
    end_offset: Mapped[int] = mapped_column(Integer, nullable=False)
    token_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    embedding: Mapped[list[float] | None] = mapped_column(EmbeddingVector, nullable=True)
    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    document = relationship("DocumentModel", back_populates="chunks")

    def __repr__(self) -> str:
        return f"<ChunkModel(document_id={self.document_id}, index={self.chunk_index})>"
