"""
FastAPI application with assembled routers.

The lifespan builds the ServiceContainer once (database engine, blob
storage, parser client, model providers, task runner, pipeline),
bootstraps tables, starts the optional reconciliation schedule and
tears everything down on shutdown.

Dependencies: fastapi, spacerag.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spacerag.api.deps.container import ServiceContainer, build_container
from spacerag.api.errors import register_exception_handlers
from spacerag.boundary.db.create_tables import create_tables
from spacerag.configs import Settings, get_settings
from spacerag.observability import configure_logging
from spacerag.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import conversations_router, documents_router, health_router, spaces_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, container: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Settings to build the container from (loaded from env when None)
        container: Pre-built container; the caller keeps ownership of it

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = container.settings if container is not None else settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        owned = container is None
        app.state.container = container or build_container(settings)
        if settings.database.auto_create_tables:
            await create_tables(app.state.container.engine)
        app.state.container.scheduler.start()
        logger.info(
            f"{__name__}:lifespan - Application started",
            extra={"environment": settings.environment, "scheduled_sync": app.state.container.scheduler.enabled},
        )

        yield

        if owned:
            await app.state.container.aclose()
        else:
            await app.state.container.scheduler.stop()
        logger.info(f"{__name__}:lifespan - Application stopped")

    app = FastAPI(
        title="SpaceRAG API",
        description="Document spaces with retrieval-augmented Q&A and cited answers",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(spaces_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(conversations_router, prefix="/api/v1")

    return app
