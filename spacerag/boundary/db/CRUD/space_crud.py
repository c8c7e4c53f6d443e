"""
Space CRUD operations.

Dependencies: sqlalchemy, spacerag.boundary.db.models
System role: Space persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.CRUD.base_crud import BaseCRUD
from spacerag.boundary.db.models.space_model import SpaceModel


class SpaceCRUD(BaseCRUD[SpaceModel]):
    """CRUD operations for SpaceModel."""

    def __init__(self) -> None:
        super().__init__(SpaceModel)

    async def get_by_user(self, session: AsyncSession, user_id: str) -> Sequence[SpaceModel]:
        """Spaces owned by a user, newest first."""
        stmt = (
            select(SpaceModel)
            .where(SpaceModel.user_id == user_id)
            .order_by(SpaceModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


space_crud = SpaceCRUD()
