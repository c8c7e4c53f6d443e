"""
Vector retriever.

Embeds a question and runs a scoped similarity search over READY
documents. Any search failure (embedding provider, database) yields an
empty result list; callers treat "no results" as a user-visible outcome.
Out-of-range limits are caller errors and raise before searching.

Dependencies: spacerag.boundary.vdb, spacerag.core.document_processing.embedding_generator
System role: RAG retrieval business logic
"""

import logging
import time
import uuid

from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.vdb import SimilarityIndex, VectorQuery, VectorSearchResult
from spacerag.configs.vector_store import MAX_TOP_K, VectorStoreSettings
from spacerag.core.document_processing.embedding_generator import EmbeddingGenerator
from spacerag.core.exceptions import ValidationError
from spacerag.observability.log_utils import error_fields

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_CHARS = 200


def build_excerpt(content: str, max_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    return content[:max_chars]


class RetrievedChunk(VectorSearchResult):
    """Search result with a short preview of the chunk."""

    excerpt: str = Field(description="Leading characters of the chunk content")


class VectorRetriever:
    """Question -> ranked chunks of READY documents in one space."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        generator: EmbeddingGenerator,
        index: SimilarityIndex,
        settings: VectorStoreSettings,
        excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
    ) -> None:
        self._session_factory = session_factory
        self._generator = generator
        self._index = index
        self._settings = settings
        self._excerpt_chars = excerpt_chars

    @property
    def index(self) -> SimilarityIndex:
        return self._index

    async def retrieve(
        self,
        question: str,
        space_id: uuid.UUID,
        top_k: int | None = None,
        similarity_threshold: float | None = None,
    ) -> list[RetrievedChunk]:
        """
        Find the chunks most similar to a question.

        Args:
            question: Query text
            space_id: Space to search
            top_k: Result cap (configured default when None)
            similarity_threshold: Inclusive minimum similarity (configured default when None)

        Returns:
            list[RetrievedChunk]: Ranked by similarity descending; empty on any search failure

        Raises:
            ValidationError: top_k or similarity_threshold out of range
        """
        top_k = self._settings.top_k if top_k is None else top_k
        if not 1 <= top_k <= MAX_TOP_K:
            raise ValidationError(f"top_k must be between 1 and {MAX_TOP_K}", field="top_k")
        if similarity_threshold is None:
            similarity_threshold = self._settings.similarity_threshold
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValidationError("similarity_threshold must be between 0 and 1", field="similarity_threshold")

        start_time = time.perf_counter()
        try:
            query = VectorQuery(
                embedding=await self._generator.embed_query(question),
                space_id=space_id,
                top_k=top_k,
                similarity_threshold=similarity_threshold,
            )
            async with self._session_factory() as session:
                results = await self._index.search(session, query)
        except Exception as e:
            logger.error(
                f"{__name__}:retrieve - Vector search failed, returning no results",
                extra={"space_id": str(space_id), **error_fields(e)},
            )
            return []

        logger.info(
            f"{__name__}:retrieve - Retrieved {len(results)} chunk(s)",
            extra={
                "space_id": str(space_id),
                "top_k": query.top_k,
                "threshold": query.similarity_threshold,
                "elapsed_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return [
            RetrievedChunk(
                **result.model_dump(),
                excerpt=build_excerpt(result.content, self._excerpt_chars),
            )
            for result in results
        ]
