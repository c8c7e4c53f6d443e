"""
Embedding task.

Embeds every chunk of a document that has no vector yet, writing
vectors back batch by batch. When all chunks already carry vectors the
stage goes straight to READY without calling the provider.

Dependencies: spacerag.core.document_processing.embedding_generator
System role: Third stage of document ingestion pipeline
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.db.CRUD import chunk_crud, document_crud
from spacerag.boundary.db.models import DocumentStatus
from spacerag.core.document_processing.embedding_generator import EmbeddingGenerator
from spacerag.core.document_processing.models import EmbeddingResult
from spacerag.core.document_processing.status_manager import DocumentStatusManager
from spacerag.core.exceptions import MissingInputError, NotFoundError

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Embed stage: pending chunks -> vectors -> READY."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        generator: EmbeddingGenerator,
        status_manager: DocumentStatusManager,
    ) -> None:
        self._session_factory = session_factory
        self._generator = generator
        self._status = status_manager

    async def run(self, document_id: uuid.UUID) -> EmbeddingResult:
        """
        Embed a document's pending chunks and mark it READY.

        Raises:
            NotFoundError: Document does not exist
            MissingInputError: Document has no chunks
            EmbeddingProviderError: Provider failure (transient)
        """
        async with self._session_factory() as session:
            if await document_crud.get_by_id(session, document_id) is None:
                raise NotFoundError("document", document_id)
            total = await chunk_crud.count_by_document(session, document_id)
            pending = [
                (chunk.id, chunk.content)
                for chunk in await chunk_crud.get_pending_embedding(session, document_id)
            ]

        if total == 0:
            raise MissingInputError("Document has no chunks to embed", stage="embed", document_id=document_id)

        if not pending:
            logger.info(
                f"{__name__}:run - All chunks already embedded, marking ready",
                extra={"document_id": str(document_id), "chunk_count": total},
            )
            await self._status.mark_ready(document_id)
            return EmbeddingResult(short_circuited=True)

        await self._status.enter_stage(document_id, DocumentStatus.EMBEDDING)

        embedded = 0
        skipped = 0
        async for batch_start, vectors in self._generator.iter_batches([text for _, text in pending]):
            async with self._session_factory() as session:
                for offset, vector in enumerate(vectors):
                    chunk_id = pending[batch_start + offset][0]
                    if vector is None:
                        skipped += 1
                        continue
                    await chunk_crud.set_embedding(session, chunk_id, vector)
                    embedded += 1
                await session.commit()

        await self._status.mark_ready(document_id)
        logger.info(
            f"{__name__}:run - Embedded document",
            extra={"document_id": str(document_id), "embedded": embedded, "skipped": skipped},
        )
        return EmbeddingResult(embedded=embedded, skipped=skipped)
