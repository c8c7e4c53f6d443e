"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from spacerag.boundary.db.CRUD import document_crud, chunk_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from spacerag.boundary.db.CRUD.base_crud import BaseCRUD
from spacerag.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from spacerag.boundary.db.CRUD.conversation_crud import (
    CitationCRUD,
    ConversationCRUD,
    MessageCRUD,
    citation_crud,
    conversation_crud,
    message_crud,
)
from spacerag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from spacerag.boundary.db.CRUD.space_crud import SpaceCRUD, space_crud

__all__ = [
    "BaseCRUD",
    "SpaceCRUD",
    "space_crud",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "ConversationCRUD",
    "conversation_crud",
    "MessageCRUD",
    "message_crud",
    "CitationCRUD",
    "citation_crud",
]
