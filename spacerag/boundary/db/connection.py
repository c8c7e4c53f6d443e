"""
Database connection management.

Builds the async engine and session factory once at process start.
The FastAPI dependency hands out request-scoped sessions from the
factory stored on the application container.

Dependencies: sqlalchemy, spacerag.configs
System role: Database connection lifecycle management
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from spacerag.configs.database import DatabaseSettings


def create_engine_from_settings(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    SQLite URLs get foreign key enforcement so that cascades behave as
    they do on Postgres. An in-memory SQLite database lives on a single
    shared connection (StaticPool), so concurrent sessions see each
    other's transactions; file databases get one connection per session.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    url = db_config.async_database_url
    if db_config.is_sqlite:
        pool_args = {"poolclass": StaticPool} if ":memory:" in url else {}
        engine = create_async_engine(
            url,
            echo=db_config.echo_sql,
            connect_args={"check_same_thread": False},
            **pool_args,
        )
        enable_sqlite_foreign_keys(engine)
        return engine

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on SQLite FK enforcement for every new DBAPI connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Returns:
        async_sessionmaker: Factory configured for explicit transaction control

    Usage:
        SessionFactory = create_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Yields:
        AsyncSession: Session scoped to the request lifetime

    Usage:
        @router.get("/documents/{id}")
        async def get_document(id: UUID, db: AsyncSession = Depends(get_async_db)):
            ...
    """
    session_factory = request.app.state.container.session_factory
    async with session_factory() as session:
        yield session
