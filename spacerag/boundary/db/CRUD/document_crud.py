"""
Document queries: per-space listing, content-hash dedup and the status
scans that feed pipeline sync.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.CRUD.base_crud import BaseCRUD
from spacerag.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """Documents are always addressed through their space."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_space_id(
        self,
        session: AsyncSession,
        space_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents for a space, newest first.

        Args:
            session: Async database session
            space_id: Owning space UUID
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels belonging to the space
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.space_id == space_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_content_hash(
        self,
        session: AsyncSession,
        space_id: UUID,
        content_hash: str,
    ) -> DocumentModel | None:
        """Find the document in a space with the given dedup hash."""
        stmt = select(DocumentModel).where(
            DocumentModel.space_id == space_id,
            DocumentModel.content_hash == content_hash,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_ids_by_status(
        self,
        session: AsyncSession,
        status: DocumentStatus,
        space_id: UUID | None = None,
    ) -> list[UUID]:
        """
        Ids of documents in a status, oldest first.

        Args:
            session: Async database session
            status: Processing status to filter by
            space_id: Restrict to one space (None scans every space)

        Returns:
            list[UUID]: Matching document ids
        """
        stmt = (
            select(DocumentModel.id)
            .where(DocumentModel.processing_status == status)
            .order_by(DocumentModel.created_at)
        )
        if space_id is not None:
            stmt = stmt.where(DocumentModel.space_id == space_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())


document_crud = DocumentCRUD()
