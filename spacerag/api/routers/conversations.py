"""
Conversation and chat API endpoints.

Routes:
- POST /spaces/{id}/ask - Ask a question (creates a conversation when none is given)
- POST /spaces/{id}/conversations - Create conversation
- GET /spaces/{id}/conversations - List conversations, most recent first
- GET /conversations/{id} - Get conversation
- DELETE /conversations/{id} - Delete conversation
- GET /conversations/{id}/messages - Messages, oldest first
- GET /messages/{id} - Message with citations

Dependencies: spacerag.application.services, spacerag.models
System role: Chat HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from spacerag.api.deps import get_chat_service, get_conversation_service, get_current_user_id
from spacerag.application.services import ChatService, ConversationService
from spacerag.models.chat import (
    AskRequest,
    AskResponse,
    ConversationCreateRequest,
    ConversationResponse,
    MessageResponse,
    MessageWithCitationsResponse,
)
from spacerag.models.common import ListResponse

router = APIRouter(tags=["chat"])


@router.post("/spaces/{space_id}/ask", response_model=AskResponse)
async def ask(
    space_id: UUID,
    request: AskRequest,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> AskResponse:
    """
    Answer a question from the space's processed documents.

    Returns 412 when no relevant source is found.
    """
    return await service.ask(space_id, user_id, request.question, request.conversation_id)


@router.post(
    "/spaces/{space_id}/conversations",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    space_id: UUID,
    request: ConversationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    conversation = await service.create_conversation(space_id, user_id, request.title)
    return ConversationResponse.model_validate(conversation)


@router.get("/spaces/{space_id}/conversations", response_model=ListResponse[ConversationResponse])
async def list_conversations(
    space_id: UUID,
    limit: int | None = Query(default=None, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> ListResponse[ConversationResponse]:
    conversations = await service.list_conversations(space_id, user_id, limit=limit)
    return ListResponse[ConversationResponse](
        items=[ConversationResponse.model_validate(c) for c in conversations],
        total=len(conversations),
    )


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    return ConversationResponse.model_validate(await service.get_conversation(conversation_id, user_id))


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> Response:
    await service.delete_conversation(conversation_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/conversations/{conversation_id}/messages", response_model=ListResponse[MessageResponse])
async def list_messages(
    conversation_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> ListResponse[MessageResponse]:
    messages = await service.list_messages(conversation_id, user_id)
    return ListResponse[MessageResponse](
        items=[MessageResponse.model_validate(m) for m in messages],
        total=len(messages),
    )


@router.get("/messages/{message_id}", response_model=MessageWithCitationsResponse)
async def get_message(
    message_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> MessageWithCitationsResponse:
    return await service.get_message_with_citations(message_id, user_id)
