"""
Document status state machine.

UPLOADED -> EXTRACTING -> CHUNKING -> EMBEDDING -> READY, plus ERROR
from any non-terminal state. Status only moves forward (re-entering the
current state is allowed so retried stages can re-mark themselves);
going back to UPLOADED happens only through reset(). Every change is a
single committed update of the document row.

Dependencies: sqlalchemy
System role: Persistence of pipeline state transitions
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.db.CRUD import chunk_crud, document_crud
from spacerag.boundary.db.models import DocumentModel, DocumentStatus
from spacerag.core.exceptions import InvalidStatusTransitionError, NotFoundError

logger = logging.getLogger(__name__)

PIPELINE_ORDER = [
    DocumentStatus.UPLOADED,
    DocumentStatus.EXTRACTING,
    DocumentStatus.CHUNKING,
    DocumentStatus.EMBEDDING,
    DocumentStatus.READY,
]
TERMINAL_STATES = frozenset({DocumentStatus.READY, DocumentStatus.ERROR})


def can_transition(current: DocumentStatus, target: DocumentStatus) -> bool:
    """Whether a non-reset status change is legal."""
    if current == target:
        return True
    if target == DocumentStatus.ERROR:
        return current not in TERMINAL_STATES
    if current == DocumentStatus.ERROR or target == DocumentStatus.UPLOADED:
        return False
    return PIPELINE_ORDER.index(target) > PIPELINE_ORDER.index(current)


def build_error_record(stage: str, message: str) -> dict[str, Any]:
    return {
        "stage": stage,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class DocumentStatusManager:
    """Applies state machine transitions to document rows."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    async def _load(session: AsyncSession, document_id: uuid.UUID) -> DocumentModel:
        document = await document_crud.get_by_id(session, document_id)
        if document is None:
            raise NotFoundError("document", document_id)
        return document

    async def get_status(self, document_id: uuid.UUID) -> DocumentStatus:
        async with self._session_factory() as session:
            return (await self._load(session, document_id)).processing_status

    async def enter_stage(self, document_id: uuid.UUID, status: DocumentStatus) -> None:
        """
        Mark a stage as running and clear any previous error.

        Raises:
            NotFoundError: Document does not exist
            InvalidStatusTransitionError: The move would go backwards or leave a terminal state
        """
        async with self._session_factory() as session:
            document = await self._load(session, document_id)
            current = document.processing_status
            if not can_transition(current, status):
                raise InvalidStatusTransitionError(document_id, current.value, status.value)
            document.processing_status = status
            document.processing_error = None
            await session.commit()

        logger.info(
            f"{__name__}:enter_stage - {current.value} -> {status.value}",
            extra={"document_id": str(document_id), "status": status.value},
        )

    async def mark_ready(self, document_id: uuid.UUID) -> int:
        """
        Mark a document READY and sync chunk_count with the persisted rows.

        Returns:
            int: Final chunk count
        """
        async with self._session_factory() as session:
            document = await self._load(session, document_id)
            current = document.processing_status
            if not can_transition(current, DocumentStatus.READY):
                raise InvalidStatusTransitionError(document_id, current.value, DocumentStatus.READY.value)
            chunk_count = await chunk_crud.count_by_document(session, document_id)
            document.processing_status = DocumentStatus.READY
            document.processing_error = None
            document.chunk_count = chunk_count
            await session.commit()

        logger.info(
            f"{__name__}:mark_ready - Document ready",
            extra={"document_id": str(document_id), "chunk_count": chunk_count},
        )
        return chunk_count

    async def mark_failed(self, document_id: uuid.UUID, stage: str, message: str) -> bool:
        """
        Record a terminal stage failure.

        A document already in ERROR keeps its original failure record, and
        a READY document is left alone.

        Returns:
            bool: True if the ERROR status was written
        """
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                logger.warning(
                    f"{__name__}:mark_failed - Document vanished before failure was recorded",
                    extra={"document_id": str(document_id), "stage": stage},
                )
                return False
            current = document.processing_status
            if current in TERMINAL_STATES:
                logger.warning(
                    f"{__name__}:mark_failed - Not overwriting {current.value} status",
                    extra={"document_id": str(document_id), "stage": stage, "error_msg": message},
                )
                return False
            document.processing_status = DocumentStatus.ERROR
            document.processing_error = build_error_record(stage, message)
            await session.commit()

        logger.error(
            f"{__name__}:mark_failed - Document failed at {stage}",
            extra={"document_id": str(document_id), "stage": stage, "error_msg": message},
        )
        return True

    async def reset(self, document_id: uuid.UUID) -> None:
        """
        Return a document to UPLOADED for reprocessing.

        Deletes every chunk, clears chunk_count and error in one transaction.

        Raises:
            NotFoundError: Document does not exist
        """
        async with self._session_factory() as session:
            document = await self._load(session, document_id)
            deleted = await chunk_crud.delete_by_document(session, document_id)
            document.processing_status = DocumentStatus.UPLOADED
            document.processing_error = None
            document.chunk_count = None
            await session.commit()

        logger.info(
            f"{__name__}:reset - Document reset for reprocessing",
            extra={"document_id": str(document_id), "chunks_deleted": deleted},
        )
