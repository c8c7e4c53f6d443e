"""
Declarative base, shared columns and the embedding column type.

Dependencies: sqlalchemy, pgvector
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, DateTime, MetaData, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Deterministic constraint names so Postgres and SQLite schemas match.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# pgvector on Postgres, JSON float arrays on SQLite (tests and local runs).
# Dimension is left open so switching embedding models needs no migration.
EmbeddingVector = Vector().with_variant(JSON(none_as_null=True), "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Registry for spaces, documents, chunks, conversations, messages and citations."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDMixin:
    """uuid4 primary key assigned client-side, so ids exist before flush."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """
    created_at / updated_at in UTC.

    updated_at refreshes on any UPDATE that does not set it itself;
    conversation touches set it explicitly to order by recency.
    """

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
