"""API routers."""

from .conversations import router as conversations_router
from .documents import router as documents_router
from .health import router as health_router
from .spaces import router as spaces_router

__all__ = [
    "conversations_router",
    "documents_router",
    "health_router",
    "spaces_router",
]
