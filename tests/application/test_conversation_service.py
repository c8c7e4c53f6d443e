"""
Tests for SpaceService and ConversationService ownership rules.
"""

import pytest

from spacerag.application.services import ConversationService, SpaceService
from spacerag.boundary.db.CRUD import conversation_crud
from spacerag.core.exceptions import ForbiddenError, NotFoundError

from tests.factories import OTHER_USER_ID, USER_ID, get_document, make_document, make_space


class TestSpaceService:
    async def test_list_returns_only_callers_spaces(self, db_session) -> None:
        service = SpaceService(db_session)
        await service.create_space(USER_ID, "Mine")
        await service.create_space(OTHER_USER_ID, "Theirs")

        spaces = await service.list_spaces(USER_ID)

        assert [space.name for space in spaces] == ["Mine"]

    async def test_delete_cascades_to_documents(self, db_session, session_factory) -> None:
        space = await make_space(session_factory)
        document = await make_document(session_factory, space.id, content="words")

        await SpaceService(db_session).delete_space(space.id, USER_ID)

        assert await get_document(session_factory, document.id) is None

    async def test_delete_of_other_users_space_is_forbidden(self, db_session, session_factory) -> None:
        space = await make_space(session_factory)

        with pytest.raises(ForbiddenError):
            await SpaceService(db_session).delete_space(space.id, OTHER_USER_ID)


class TestConversationService:
    """Test suite for ConversationService."""

    async def test_list_is_ordered_by_recency(self, db_session, session_factory) -> None:
        # Arrange
        space = await make_space(session_factory)
        service = ConversationService(db_session)
        older = await service.create_conversation(space.id, USER_ID, "Older")
        newer = await service.create_conversation(space.id, USER_ID, "Newer")
        await conversation_crud.touch(db_session, older.id)
        await db_session.commit()

        # Act
        conversations = await service.list_conversations(space.id, USER_ID)

        # Assert
        assert [c.id for c in conversations] == [older.id, newer.id]

    async def test_other_users_conversation_is_forbidden(self, db_session, session_factory) -> None:
        space = await make_space(session_factory)
        conversation = await conversation_crud.create(
            db_session, space_id=space.id, user_id=OTHER_USER_ID, title="Theirs"
        )
        await db_session.commit()

        with pytest.raises(ForbiddenError):
            await ConversationService(db_session).get_conversation(conversation.id, USER_ID)

    async def test_delete_then_get_is_not_found(self, db_session, session_factory) -> None:
        space = await make_space(session_factory)
        service = ConversationService(db_session)
        conversation = await service.create_conversation(space.id, USER_ID, "Short lived")

        await service.delete_conversation(conversation.id, USER_ID)

        with pytest.raises(NotFoundError):
            await service.get_conversation(conversation.id, USER_ID)
