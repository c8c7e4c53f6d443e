"""
Tests for VectorRetriever over the numpy similarity index.

Threshold is inclusive, only READY documents of the requested space are
searched, results are capped at top-K and any failure yields [].
"""

import uuid

import pytest

from spacerag.boundary.db.models import DocumentStatus
from spacerag.boundary.vdb import NumpyIndex
from spacerag.configs.vector_store import MAX_TOP_K, VectorStoreSettings
from spacerag.core.document_processing.embedding_generator import EmbeddingGenerator
from spacerag.core.exceptions import ValidationError
from spacerag.core.rag_query import VectorRetriever, build_excerpt

from tests.factories import make_chunks, make_document, make_space
from tests.fakes import DIMENSION, FakeEmbeddings, no_sleep

QUESTION = "the question"


def axis(*values: float) -> list[float]:
    return list(values) + [0.0] * (DIMENSION - len(values))


QUERY_VECTOR = axis(1.0)
# cosine 7/10 with QUERY_VECTOR
AT_THRESHOLD = axis(7.0, 5.0, 5.0, 1.0)
# cosine 3/5 with QUERY_VECTOR
BELOW_THRESHOLD = axis(3.0, 4.0)
ORTHOGONAL = axis(0.0, 1.0)


@pytest.fixture
def embeddings() -> FakeEmbeddings:
    return FakeEmbeddings(vectors={QUESTION: QUERY_VECTOR})


@pytest.fixture
def retriever(session_factory, embeddings: FakeEmbeddings) -> VectorRetriever:
    generator = EmbeddingGenerator(embeddings, dimension=DIMENSION, sleep=no_sleep)
    return VectorRetriever(
        session_factory,
        generator,
        NumpyIndex(),
        VectorStoreSettings(store_type="numpy", top_k=5, similarity_threshold=0.7),
        excerpt_chars=10,
    )


@pytest.fixture
async def space(session_factory):
    return await make_space(session_factory)


async def ready_document(session_factory, space_id, chunks, title="Notes", status=DocumentStatus.READY):
    document = await make_document(session_factory, space_id, content=str(uuid.uuid4()), title=title, status=status)
    await make_chunks(session_factory, document.id, chunks)
    return document


class TestVectorRetriever:
    """Test suite for VectorRetriever.retrieve()."""

    async def test_similarity_equal_to_threshold_is_included(self, session_factory, retriever, space) -> None:
        # Arrange
        await ready_document(
            session_factory,
            space.id,
            [("exact match", QUERY_VECTOR), ("at threshold", AT_THRESHOLD), ("below", BELOW_THRESHOLD)],
        )

        # Act
        results = await retriever.retrieve(QUESTION, space.id)

        # Assert
        assert [result.content for result in results] == ["exact match", "at threshold"]
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == pytest.approx(0.7)

    async def test_results_are_ordered_by_similarity_descending(self, session_factory, retriever, space) -> None:
        await ready_document(
            session_factory,
            space.id,
            [("weaker", AT_THRESHOLD), ("stronger", QUERY_VECTOR)],
        )

        results = await retriever.retrieve(QUESTION, space.id)

        assert [result.content for result in results] == ["stronger", "weaker"]

    async def test_ties_keep_insertion_order(self, session_factory, retriever, space) -> None:
        await ready_document(session_factory, space.id, [(f"chunk {n}", QUERY_VECTOR) for n in range(3)])

        results = await retriever.retrieve(QUESTION, space.id)

        assert [result.chunk_index for result in results] == [0, 1, 2]

    async def test_results_are_capped_at_top_k(self, session_factory, retriever, space) -> None:
        await ready_document(session_factory, space.id, [(f"chunk {n}", QUERY_VECTOR) for n in range(7)])

        assert len(await retriever.retrieve(QUESTION, space.id)) == 5
        assert len(await retriever.retrieve(QUESTION, space.id, top_k=2)) == 2

    @pytest.mark.parametrize(
        "status",
        [DocumentStatus.UPLOADED, DocumentStatus.CHUNKING, DocumentStatus.EMBEDDING, DocumentStatus.ERROR],
    )
    async def test_only_ready_documents_are_searched(
        self, session_factory, retriever, space, status: DocumentStatus
    ) -> None:
        await ready_document(session_factory, space.id, [("not ready", QUERY_VECTOR)], status=status)

        assert await retriever.retrieve(QUESTION, space.id) == []

    async def test_other_spaces_are_not_searched(self, session_factory, retriever, space) -> None:
        other_space = await make_space(session_factory, name="Other")
        await ready_document(session_factory, other_space.id, [("elsewhere", QUERY_VECTOR)])

        assert await retriever.retrieve(QUESTION, space.id) == []

    async def test_chunks_without_embeddings_are_skipped(self, session_factory, retriever, space) -> None:
        await ready_document(session_factory, space.id, [("pending", None), ("embedded", QUERY_VECTOR)])

        results = await retriever.retrieve(QUESTION, space.id)

        assert [result.content for result in results] == ["embedded"]

    async def test_result_carries_document_title_and_excerpt(self, session_factory, retriever, space) -> None:
        document = await ready_document(
            session_factory, space.id, [("a long chunk of text", QUERY_VECTOR)], title="Lecture 1"
        )

        [result] = await retriever.retrieve(QUESTION, space.id)

        assert result.document_id == document.id
        assert result.document_title == "Lecture 1"
        assert result.excerpt == "a long chu"

    async def test_nothing_above_threshold_returns_empty(self, session_factory, retriever, space) -> None:
        await ready_document(session_factory, space.id, [("unrelated", ORTHOGONAL)])

        assert await retriever.retrieve(QUESTION, space.id) == []

    async def test_embedding_failure_returns_empty(
        self, session_factory, retriever, space, embeddings: FakeEmbeddings
    ) -> None:
        """Provider errors are logged and reported as no results."""
        await ready_document(session_factory, space.id, [("exact match", QUERY_VECTOR)])
        embeddings.error = RuntimeError("provider down")

        assert await retriever.retrieve(QUESTION, space.id) == []


    @pytest.mark.parametrize(
        ("top_k", "similarity_threshold"),
        [(0, None), (101, None), (None, -0.1), (None, 1.5)],
    )
    async def test_out_of_range_limits_raise_instead_of_returning_empty(
        self, session_factory, retriever, space, embeddings: FakeEmbeddings, top_k, similarity_threshold
    ) -> None:
        await ready_document(session_factory, space.id, [("exact match", QUERY_VECTOR)])

        with pytest.raises(ValidationError):
            await retriever.retrieve(QUESTION, space.id, top_k=top_k, similarity_threshold=similarity_threshold)
        assert embeddings.query_calls == []

    async def test_largest_allowed_top_k_searches(self, session_factory, retriever, space) -> None:
        await ready_document(session_factory, space.id, [("exact match", QUERY_VECTOR)])

        [result] = await retriever.retrieve(QUESTION, space.id, top_k=MAX_TOP_K)

        assert result.content == "exact match"

def test_build_excerpt_truncates() -> None:
    assert build_excerpt("abcdef", max_chars=3) == "abc"
    assert build_excerpt("ab", max_chars=3) == "ab"
