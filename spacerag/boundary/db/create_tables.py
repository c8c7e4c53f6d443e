"""
Database table creation.

Creates the pgvector extension (Postgres only) and all tables defined
in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, spacerag.configs
System role: Database schema initialization

Usage:
    python -m spacerag.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from spacerag.boundary.db.base import Base
from spacerag.boundary.db import models  # noqa: F401  registers models on Base.metadata

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE EXTENSION / CREATE TABLE IF NOT EXISTS, so safe
    to run on every startup.

    Args:
        engine: Async engine to create tables on
    """
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Schema ready ({engine.dialect.name})")


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all tables and their data."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _main() -> None:
    from spacerag.boundary.db.connection import create_engine_from_settings
    from spacerag.configs import get_settings

    engine = create_engine_from_settings(get_settings().database)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_main())
