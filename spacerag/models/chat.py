"""
Chat domain models and schemas.

Request/response schemas for conversations, messages and ask.

Dependencies: pydantic
System role: Chat API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from spacerag.boundary.db.models import MessageRole
from spacerag.models.citation import Citation, CitationWithChunk


class AskRequest(BaseModel):
    """Request schema for asking a question."""

    question: str = Field(min_length=1, max_length=2000, description="User question")
    conversation_id: uuid.UUID | None = Field(default=None, description="Continue an existing conversation")


class AnswerMetadata(BaseModel):
    """Processing metadata stored on an answer message."""

    model: str
    processing_time_ms: float
    vector_search_time_ms: float
    chunks_retrieved: int


class AskResponse(BaseModel):
    """Response schema for ask."""

    answer: str
    conversation_id: uuid.UUID
    message_id: uuid.UUID
    citations: list[Citation]
    metadata: AnswerMetadata


class ConversationCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class ConversationResponse(BaseModel):
    """Conversation summary."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    space_id: uuid.UUID
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Single message in history."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    conversation_id: uuid.UUID
    role: MessageRole = Field(description="Message role: 'question' or 'answer'")
    content: str
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="message_metadata")
    created_at: datetime


class MessageWithCitationsResponse(MessageResponse):
    citations: list[CitationWithChunk] = Field(default_factory=list)
