"""
Space service orchestrator.

Coordinates space lifecycle operations. Deleting a space cascades to
its documents, chunks, conversations, messages and citations.

Dependencies: spacerag.boundary.db.CRUD
System role: Space use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.application.services.access import require_space
from spacerag.boundary.db.CRUD import space_crud
from spacerag.boundary.db.models import SpaceModel

logger = logging.getLogger(__name__)


class SpaceService:
    """Space service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize space service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_space(self, user_id: str, name: str, description: str | None = None) -> SpaceModel:
        space = await space_crud.create(self.db, user_id=user_id, name=name, description=description)
        await self.db.commit()
        logger.info(
            f"{__name__}:create_space - Space created",
            extra={"space_id": str(space.id), "user_id": user_id},
        )
        return space

    async def list_spaces(self, user_id: str) -> list[SpaceModel]:
        return list(await space_crud.get_by_user(self.db, user_id))

    async def get_space(self, space_id: UUID, user_id: str) -> SpaceModel:
        """
        Raises:
            NotFoundError: Space does not exist
            ForbiddenError: Space belongs to another user
        """
        return await require_space(self.db, space_id, user_id)

    async def delete_space(self, space_id: UUID, user_id: str) -> None:
        """
        Delete a space and everything in it.

        Raises:
            NotFoundError: Space does not exist
            ForbiddenError: Space belongs to another user
        """
        await require_space(self.db, space_id, user_id)
        await space_crud.delete_by_id(self.db, space_id)
        await self.db.commit()
        logger.info(
            f"{__name__}:delete_space - Space deleted",
            extra={"space_id": str(space_id), "user_id": user_id},
        )
