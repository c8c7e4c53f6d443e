"""
Text chunking task.

Splits a document's extracted text and replaces its chunk rows in a
single transaction (delete, bulk insert, chunk_count), so a retry after
a partial failure starts from a clean slate.

Dependencies: spacerag.core.document_processing.text_splitter
System role: Second stage of document ingestion pipeline
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.db.CRUD import chunk_crud, document_crud
from spacerag.core.document_processing.text_splitter import TextChunker
from spacerag.core.exceptions import MissingInputError, NotFoundError

logger = logging.getLogger(__name__)


class ChunkingTask:
    """Chunk stage: document.content -> chunk rows."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        chunker: TextChunker,
    ) -> None:
        self._session_factory = session_factory
        self._chunker = chunker

    async def run(self, document_id: uuid.UUID) -> int:
        """
        Chunk a document.

        Returns:
            int: Number of chunks written

        Raises:
            NotFoundError: Document does not exist
            MissingInputError: Document has no text to chunk
        """
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                raise NotFoundError("document", document_id)

            extraction = (document.document_metadata or {}).get("extraction") or {}
            chunks = self._chunker.split(document.content or "", extraction.get("page_spans"))
            if not chunks:
                raise MissingInputError("Document has no text to chunk", stage="chunk", document_id=document_id)

            deleted = await chunk_crud.delete_by_document(session, document_id)
            await chunk_crud.bulk_create(
                session,
                document_id,
                [
                    {
                        "content": chunk.content,
                        "chunk_index": chunk.index,
                        "start_offset": chunk.start_offset,
                        "end_offset": chunk.end_offset,
                        "token_count": chunk.token_count,
                        "chunk_metadata": chunk.metadata,
                        "embedding": None,
                    }
                    for chunk in chunks
                ],
            )
            document.chunk_count = len(chunks)
            await session.commit()

        logger.info(
            f"{__name__}:run - Chunked document",
            extra={
                "document_id": str(document_id),
                "chunk_count": len(chunks),
                "replaced": deleted,
            },
        )
        return len(chunks)
