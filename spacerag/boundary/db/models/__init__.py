"""
Database models package.

Exports:
  - SpaceModel: Tenant scope
  - DocumentModel, DocumentStatus, DocumentType: Ingested sources
  - ChunkModel: Offset-tracked, embeddable text slices
  - ConversationModel, MessageModel, MessageRole, CitationModel: Chat history

Dependencies: sqlalchemy, spacerag.boundary.db.base
System role: Database model definitions for domain entities
"""

from spacerag.boundary.db.models.chunk_model import ChunkModel
from spacerag.boundary.db.models.conversation_model import (
    CitationModel,
    ConversationModel,
    MessageModel,
    MessageRole,
)
from spacerag.boundary.db.models.document_model import DocumentModel, DocumentStatus, DocumentType
from spacerag.boundary.db.models.space_model import SpaceModel

__all__ = [
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
