"""
Conversation, message and citation CRUD operations.

Dependencies: sqlalchemy, spacerag.boundary.db.models
System role: Chat history persistence operations
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spacerag.boundary.db.base import utcnow
from spacerag.boundary.db.CRUD.base_crud import BaseCRUD
from spacerag.boundary.db.models.chunk_model import ChunkModel
from spacerag.boundary.db.models.conversation_model import (
    CitationModel,
    ConversationModel,
    MessageModel,
)


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """CRUD operations for ConversationModel."""

    def __init__(self) -> None:
        super().__init__(ConversationModel)

    async def get_by_space(
        self,
        session: AsyncSession,
        space_id: UUID,
        user_id: str,
        limit: int | None = None,
    ) -> Sequence[ConversationModel]:
        """A user's conversations in a space, most recently active first."""
        stmt = (
            select(ConversationModel)
            .where(
                ConversationModel.space_id == space_id,
                ConversationModel.user_id == user_id,
            )
            .order_by(ConversationModel.updated_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def touch(
        self,
        session: AsyncSession,
        id: UUID,
        at: datetime | None = None,
    ) -> None:
        """Bump the recency timestamp."""
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == id)
            .values(updated_at=at or utcnow())
        )
        await session.execute(stmt)


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        super().__init__(MessageModel)

    async def get_by_conversation(
        self,
        session: AsyncSession,
        conversation_id: UUID,
    ) -> Sequence[MessageModel]:
        """All messages of a conversation, oldest first."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_recent(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        limit: int,
        exclude_ids: Sequence[UUID] = (),
    ) -> list[MessageModel]:
        """
        Most recent messages of a conversation, returned oldest to newest.

        Args:
            session: Async database session
            conversation_id: Conversation to read
            limit: Maximum number of messages
            exclude_ids: Messages to leave out (the question being answered)

        Returns:
            list[MessageModel]: Up to `limit` messages in chronological order
        """
        if limit <= 0:
            return []
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.desc())
            .limit(limit)
        )
        if exclude_ids:
            stmt = stmt.where(MessageModel.id.not_in(list(exclude_ids)))
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))

    async def get_with_citations(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> MessageModel | None:
        """Load a message with its citations, their chunks and documents."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.id == id)
            .options(
                selectinload(MessageModel.conversation),
                selectinload(MessageModel.citations)
                .selectinload(CitationModel.chunk)
                .selectinload(ChunkModel.document),
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


class CitationCRUD(BaseCRUD[CitationModel]):
    """CRUD operations for CitationModel."""

    def __init__(self) -> None:
        super().__init__(CitationModel)

    async def bulk_create(
        self,
        session: AsyncSession,
        message_id: UUID,
        rows: Sequence[dict[str, Any]],
    ) -> list[CitationModel]:
        return await self.create_many(session, rows, message_id=message_id)


conversation_crud = ConversationCRUD()
message_crud = MessageCRUD()
citation_crud = CitationCRUD()
