"""Service orchestrators."""

from .chat_service import ChatService
from .conversation_service import ConversationService
from .document_service import DocumentService
from .space_service import SpaceService

__all__ = [
    "ChatService",
    "ConversationService",
    "DocumentService",
    "SpaceService",
]
