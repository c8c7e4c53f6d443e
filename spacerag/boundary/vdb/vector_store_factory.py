"""
Similarity index factory for selecting between pgvector and numpy scoring.

Depends on VECTOR_STORE_STORE_TYPE. SQLite deployments always get the
numpy index since pgvector operators need Postgres.

Dependencies: spacerag.boundary.vdb, spacerag.configs
System role: Similarity index instantiation and selection
"""

import logging

from spacerag.boundary.vdb.similarity_index import NumpyIndex, PgVectorIndex, SimilarityIndex
from spacerag.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def create_similarity_index(settings: VectorStoreSettings, is_sqlite: bool = False) -> SimilarityIndex:
    """
    Build the similarity index from configuration.

    Args:
        settings: Vector store settings
        is_sqlite: Whether the relational store is SQLite

    Returns:
        SimilarityIndex: Configured index

    Raises:
        ValueError: If store_type is invalid
    """
    store_type = settings.store_type.lower()

    if store_type == "numpy" or is_sqlite:
        logger.info(f"{__name__}:create_similarity_index - Using numpy cosine scoring")
        return NumpyIndex()

    if store_type == "pgvector":
        logger.info(f"{__name__}:create_similarity_index - Using pgvector cosine distance")
        return PgVectorIndex()

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. Must be 'pgvector' or 'numpy'."
    )
