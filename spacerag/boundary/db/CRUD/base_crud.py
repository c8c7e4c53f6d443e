"""
Shared CRUD behavior for the space, document, chunk and conversation tables.

Every method flushes and never commits: services and pipeline stages own
the transaction, so a failed answer can roll back its placeholder message
and a failed stage leaves no partial chunk set behind.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations for one mapped model.

    Subclasses add the scoped queries (by space, by document, by status).
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """
        Insert one row.

        The instance is refreshed so server-side and default values
        (id, created_at) are loaded before the caller serializes it.
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def create_many(
        self,
        session: AsyncSession,
        rows: Sequence[dict[str, Any]],
        **shared: Any,
    ) -> list[ModelT]:
        """
        Insert rows in the given order.

        Args:
            session: Async database session
            rows: Per-row column values
            **shared: Values common to every row (the parent id)

        Returns:
            list: Flushed instances, same order as rows
        """
        instances = [self.model(**shared, **row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete by primary key with a core DELETE.

        Children go through ON DELETE CASCADE in the schema rather than ORM
        cascades, so deleting a space removes its documents, chunks,
        conversations and messages in one statement.

        Returns:
            bool: False when no row matched
        """
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return (result.rowcount or 0) > 0
