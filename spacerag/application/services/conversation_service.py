"""
Conversation service orchestrator.

Explicit conversation management; conversations are also created
implicitly by ChatService.ask.

Dependencies: spacerag.boundary.db.CRUD
System role: Conversation use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.application.services.access import require_conversation, require_space
from spacerag.boundary.db.CRUD import conversation_crud
from spacerag.boundary.db.models import ConversationModel

logger = logging.getLogger(__name__)


class ConversationService:
    """Conversation service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_conversation(self, space_id: UUID, user_id: str, title: str) -> ConversationModel:
        """
        Raises:
            NotFoundError: Space does not exist
            ForbiddenError: Space belongs to another user
        """
        await require_space(self.db, space_id, user_id)
        conversation = await conversation_crud.create(
            self.db, space_id=space_id, user_id=user_id, title=title
        )
        await self.db.commit()
        logger.info(
            f"{__name__}:create_conversation - Conversation created",
            extra={"conversation_id": str(conversation.id), "space_id": str(space_id)},
        )
        return conversation

    async def list_conversations(
        self,
        space_id: UUID,
        user_id: str,
        limit: int | None = None,
    ) -> list[ConversationModel]:
        """The user's conversations in a space, most recently active first."""
        await require_space(self.db, space_id, user_id)
        return list(await conversation_crud.get_by_space(self.db, space_id, user_id, limit=limit))

    async def get_conversation(self, conversation_id: UUID, user_id: str) -> ConversationModel:
        return await require_conversation(self.db, conversation_id, user_id)

    async def delete_conversation(self, conversation_id: UUID, user_id: str) -> None:
        await require_conversation(self.db, conversation_id, user_id)
        await conversation_crud.delete_by_id(self.db, conversation_id)
        await self.db.commit()
        logger.info(
            f"{__name__}:delete_conversation - Conversation deleted",
            extra={"conversation_id": str(conversation_id)},
        )
