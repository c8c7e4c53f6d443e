"""
Dependency injection providers.

Factory functions for FastAPI dependencies. Long-lived components come
from the ServiceContainer on app.state; services are built per request
around a request-scoped session.

Dependencies: fastapi, spacerag.application, spacerag.boundary
System role: DI providers for service injection
"""

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.api.deps.container import ServiceContainer
from spacerag.application.services import (
    ChatService,
    ConversationService,
    DocumentService,
    SpaceService,
)
from spacerag.boundary.db import get_async_db
from spacerag.core.exceptions import ValidationError

USER_ID_HEADER = "X-User-Id"


def get_container(request: Request) -> ServiceContainer:
    """Container built by the application lifespan."""
    return request.app.state.container


def get_current_user_id(x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER)) -> str:
    """
    Caller identity.

    Authentication is external; the authenticated user id arrives in a header.

    Raises:
        ValidationError: Header missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise ValidationError(f"{USER_ID_HEADER} header is required", field=USER_ID_HEADER)
    return x_user_id.strip()


def get_space_service(db: AsyncSession = Depends(get_async_db)) -> SpaceService:
    """
    Get space service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SpaceService: Space service instance
    """
    return SpaceService(db=db)


def get_conversation_service(db: AsyncSession = Depends(get_async_db)) -> ConversationService:
    return ConversationService(db=db)


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    container: ServiceContainer = Depends(get_container),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        container: Process-wide service container

    Returns:
        DocumentService: Document service wired to the pipeline and blob storage
    """
    return DocumentService(
        db=db,
        pipeline=container.pipeline,
        storage=container.storage,
        presign_ttl_seconds=container.settings.blob_storage.presigned_url_expiry,
    )


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    container: ServiceContainer = Depends(get_container),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)
        container: Process-wide service container

    Returns:
        ChatService: Chat service with retriever and synthesizer
    """
    return ChatService(
        db=db,
        retriever=container.retriever,
        synthesizer=container.synthesizer,
        settings=container.settings.chat,
        rate_limiter=container.rate_limiter,
    )
