"""
Similarity index implementations.

Both variants score chunks of READY documents in one space by cosine
similarity, keep scores >= threshold, order by score descending and
break exact ties by chunk insertion order (created_at, chunk_index).

- PgVectorIndex: scoring and filtering in Postgres via pgvector's
  cosine distance operator
- NumpyIndex: candidate rows loaded from any SQL backend, scored with numpy

Dependencies: sqlalchemy, pgvector, numpy
System role: Similarity search over persisted chunk embeddings
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.boundary.db.models import ChunkModel, DocumentModel, DocumentStatus
from spacerag.boundary.vdb.vector_schemas import VectorQuery, VectorSearchResult

logger = logging.getLogger(__name__)


def _searchable_filters(query: VectorQuery) -> tuple:
    return (
        DocumentModel.space_id == query.space_id,
        DocumentModel.processing_status == DocumentStatus.READY,
        ChunkModel.embedding.is_not(None),
    )


def _to_result(chunk: ChunkModel, title: str, similarity: float) -> VectorSearchResult:
    return VectorSearchResult(
        chunk_id=chunk.id,
        document_id=chunk.document_id,
        document_title=title,
        content=chunk.content,
        chunk_index=chunk.chunk_index,
        similarity=float(similarity),
        metadata=dict(chunk.chunk_metadata or {}),
    )


class SimilarityIndex(ABC):
    """Scoped top-K cosine search over chunk embeddings."""

    @abstractmethod
    async def search(self, session: AsyncSession, query: VectorQuery) -> list[VectorSearchResult]:
        """Return ranked matches for the query."""


class PgVectorIndex(SimilarityIndex):
    """Cosine search executed inside Postgres."""

    async def search(self, session: AsyncSession, query: VectorQuery) -> list[VectorSearchResult]:
        distance = ChunkModel.embedding.cosine_distance(query.embedding)
        similarity = 1 - distance
        stmt = (
            select(ChunkModel, DocumentModel.title, similarity.label("similarity"))
            .join(DocumentModel, ChunkModel.document_id == DocumentModel.id)
            .where(*_searchable_filters(query), similarity >= query.similarity_threshold)
            .order_by(distance.asc(), ChunkModel.created_at.asc(), ChunkModel.chunk_index.asc())
            .limit(query.top_k)
        )
        result = await session.execute(stmt)
        return [_to_result(chunk, title, score) for chunk, title, score in result.all()]


class NumpyIndex(SimilarityIndex):
    """Cosine search computed in-process over candidate rows."""

    async def search(self, session: AsyncSession, query: VectorQuery) -> list[VectorSearchResult]:
        stmt = (
            select(ChunkModel, DocumentModel.title)
            .join(DocumentModel, ChunkModel.document_id == DocumentModel.id)
            .where(*_searchable_filters(query))
            .order_by(ChunkModel.created_at.asc(), ChunkModel.chunk_index.asc())
        )
        rows = (await session.execute(stmt)).all()
        if not rows:
            return []

        query_vector = np.asarray(query.embedding, dtype=np.float64)
        query_norm = np.linalg.norm(query_vector)
        if query_norm == 0:
            return []

        candidates = []
        vectors = []
        for chunk, title in rows:
            vector = np.asarray(chunk.embedding, dtype=np.float64)
            if vector.shape != query_vector.shape:
                logger.warning(
                    f"{__name__}:search - Skipping chunk with mismatched dimension",
                    extra={"chunk_id": str(chunk.id), "dimension": vector.shape[0]},
                )
                continue
            candidates.append((chunk, title))
            vectors.append(vector)
        if not vectors:
            return []

        matrix = np.vstack(vectors)
        norms = np.linalg.norm(matrix, axis=1)
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = (matrix @ query_vector) / (norms * query_norm)
        scores = np.where(norms == 0, 0.0, scores)

        order = np.argsort(-scores, kind="stable")
        results = []
        for position in order:
            score = float(scores[position])
            if score < query.similarity_threshold:
                continue
            chunk, title = candidates[position]
            results.append(_to_result(chunk, title, score))
            if len(results) >= query.top_k:
                break
        return results
