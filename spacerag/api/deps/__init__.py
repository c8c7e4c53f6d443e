"""API dependency providers."""

from .container import ServiceContainer, build_container
from .dependencies import (
    get_chat_service,
    get_container,
    get_conversation_service,
    get_current_user_id,
    get_document_service,
    get_space_service,
)

__all__ = [
    "ServiceContainer",
    "build_container",
    "get_chat_service",
    "get_container",
    "get_conversation_service",
    "get_current_user_id",
    "get_document_service",
    "get_space_service",
]
