"""
Ownership checks shared by the services.

Missing resources raise NotFoundError; resources owned by another user
raise ForbiddenError. Checks run before any mutation.

Dependencies: spacerag.boundary.db.CRUD
System role: Access control for space-scoped resources
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.CRUD import conversation_crud, document_crud, space_crud
from spacerag.boundary.db.models import ConversationModel, DocumentModel, SpaceModel
from spacerag.core.exceptions import ForbiddenError, NotFoundError


async def require_space(db: AsyncSession, space_id: UUID, user_id: str) -> SpaceModel:
    space = await space_crud.get_by_id(db, space_id)
    if space is None:
        raise NotFoundError("space", space_id)
    if space.user_id != user_id:
        raise ForbiddenError("space", space_id)
    return space


async def require_document(db: AsyncSession, document_id: UUID, user_id: str) -> DocumentModel:
    document = await document_crud.get_by_id(db, document_id)
    if document is None:
        raise NotFoundError("document", document_id)
    await require_space(db, document.space_id, user_id)
    return document


async def require_conversation(
    db: AsyncSession,
    conversation_id: UUID,
    user_id: str,
    space_id: UUID | None = None,
) -> ConversationModel:
    """
    Load a conversation the user may write to.

    A conversation in a different space than the one requested counts
    as not found.
    """
    conversation = await conversation_crud.get_by_id(db, conversation_id)
    if conversation is None or (space_id is not None and conversation.space_id != space_id):
        raise NotFoundError("conversation", conversation_id)
    if conversation.user_id != user_id:
        raise ForbiddenError("conversation", conversation_id)
    return conversation
