"""
Chunk CRUD operations.

Chunks are written in bulk per document and replaced wholesale on
rechunking; embeddings are written back one row at a time.

Dependencies: sqlalchemy, spacerag.boundary.db.models
System role: Chunk and embedding persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.CRUD.base_crud import BaseCRUD
from spacerag.boundary.db.models.chunk_model import ChunkModel


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        super().__init__(ChunkModel)

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete every chunk of a document.

        Returns:
            int: Number of rows removed
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def bulk_create(
        self,
        session: AsyncSession,
        document_id: UUID,
        rows: Sequence[dict[str, Any]],
    ) -> list[ChunkModel]:
        """
        Insert chunks for a document in ordinal order.

        Args:
            session: Async database session
            document_id: Owning document
            rows: Column values per chunk (content, chunk_index, offsets, ...)

        Returns:
            list[ChunkModel]: Inserted instances
        """
        return await self.create_many(session, rows, document_id=document_id)

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ChunkModel]:
        """Chunks of a document ordered by chunk_index."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_pending_embedding(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ChunkModel]:
        """Chunks of a document that have no embedding yet."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id, ChunkModel.embedding.is_(None))
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = select(func.count(ChunkModel.id)).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def set_embedding(
        self,
        session: AsyncSession,
        chunk_id: UUID,
        embedding: list[float],
    ) -> None:
        """Write a validated vector onto a chunk row."""
        stmt = update(ChunkModel).where(ChunkModel.id == chunk_id).values(embedding=embedding)
        await session.execute(stmt)


chunk_crud = ChunkCRUD()
