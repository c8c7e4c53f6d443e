"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - create_engine_from_settings(), create_session_factory(), get_async_db(): Connection management
  - Space/Document/Chunk/Conversation/Message/Citation models and enums
  - CRUD singletons

Dependencies: sqlalchemy, pgvector, spacerag.configs
System role: Relational store with referential integrity for all persisted state
"""

from spacerag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from spacerag.boundary.db.connection import (
    create_engine_from_settings,
    create_session_factory,
    get_async_db,
)
from spacerag.boundary.db.models import (
    ChunkModel,
    CitationModel,
    ConversationModel,
    DocumentModel,
    DocumentStatus,
    DocumentType,
    MessageModel,
    MessageRole,
    SpaceModel,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_engine_from_settings",
    "create_session_factory",
    "get_async_db",
    "SpaceModel",
    "DocumentModel",
    "DocumentStatus",
    "DocumentType",
    "ChunkModel",
    "ConversationModel",
    "MessageModel",
    "MessageRole",
    "CitationModel",
]
