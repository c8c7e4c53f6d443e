"""
Vector search boundary layer.

- PgVectorIndex: Postgres + pgvector cosine search
- NumpyIndex: in-process cosine search over any SQL backend

Dependencies: sqlalchemy, pgvector, numpy
System role: Similarity index for RAG retrieval
"""

from spacerag.boundary.vdb.similarity_index import NumpyIndex, PgVectorIndex, SimilarityIndex
from spacerag.boundary.vdb.vector_schemas import VectorQuery, VectorSearchResult
from spacerag.boundary.vdb.vector_store_factory import create_similarity_index

__all__ = [
    "SimilarityIndex",
    "PgVectorIndex",
    "NumpyIndex",
    "VectorQuery",
    "VectorSearchResult",
    "create_similarity_index",
]
