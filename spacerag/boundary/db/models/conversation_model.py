"""
Conversation, message and citation ORM models.

Conversation owns Messages; an answer Message owns its Citations.
All deletions cascade downward.

Dependencies: sqlalchemy, spacerag.boundary.db.base
System role: Chat history persistence
"""

import enum
import uuid
from typing import Any

from sqlalchemy import JSON, Enum, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spacerag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class MessageRole(str, enum.Enum):
    """Author of a message."""

    QUESTION = "question"
    ANSWER = "answer"


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation ORM model.

    updated_at doubles as the recency timestamp for listing.
    """

    __tablename__ = "conversations"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    space = relationship("SpaceModel", back_populates="conversations")
    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.created_at",
    )


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Answers are inserted as empty placeholders and finalized once the
    model returns; after that they are never changed.
    """

    __tablename__ = "messages"

    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MessageRole] = mapped_column(Enum(MessageRole, native_enum=False), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    message_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    conversation = relationship("ConversationModel", back_populates="messages")
    citations = relationship(
        "CitationModel",
        back_populates="message",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CitationModel.citation_index",
    )


class CitationModel(Base, UUIDMixin, TimestampMixin):
    """Link between an answer message and one retrieved chunk."""

    __tablename__ = "citations"

    message_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("chunks.id", ondelete="CASCADE"),
        nullable=False,
    )
    relevance_score: Mapped[float] = mapped_column(Float, nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False)
    citation_index: Mapped[int] = mapped_column(Integer, nullable=False)

    message = relationship("MessageModel", back_populates="citations")
    chunk = relationship("ChunkModel")
