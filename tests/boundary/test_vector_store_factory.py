import pytest

from spacerag.boundary.vdb import NumpyIndex, PgVectorIndex, create_similarity_index
from spacerag.configs.vector_store import VectorStoreSettings


def test_pgvector_on_postgres():
    index = create_similarity_index(VectorStoreSettings(store_type="pgvector"), is_sqlite=False)
    assert isinstance(index, PgVectorIndex)


def test_sqlite_always_uses_numpy():
    index = create_similarity_index(VectorStoreSettings(store_type="pgvector"), is_sqlite=True)
    assert isinstance(index, NumpyIndex)


def test_numpy_by_name():
    assert isinstance(create_similarity_index(VectorStoreSettings(store_type="NumPy")), NumpyIndex)


def test_unknown_store_type_raises():
    with pytest.raises(ValueError, match="Invalid VECTOR_STORE_STORE_TYPE"):
        create_similarity_index(VectorStoreSettings(store_type="faiss"))
