"""
Tests for embedding provider construction.

The Google client is patched at the class level, so no request leaves
the process.
"""

import pytest
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from spacerag.boundary.llm import FixedDimensionEmbeddings, create_embeddings
from spacerag.configs.llm import LLMSettings


@pytest.fixture
def recorded_calls(monkeypatch) -> list[tuple[str, dict]]:
    calls: list[tuple[str, dict]] = []

    def fake_embed_documents(self, texts, **kwargs):
        calls.append(("documents", kwargs))
        return [[0.0] * kwargs["output_dimensionality"] for _ in texts]

    def fake_embed_query(self, text, **kwargs):
        calls.append(("query", kwargs))
        return [0.0] * kwargs["output_dimensionality"]

    monkeypatch.setattr(GoogleGenerativeAIEmbeddings, "embed_documents", fake_embed_documents)
    monkeypatch.setattr(GoogleGenerativeAIEmbeddings, "embed_query", fake_embed_query)
    return calls


class TestCreateEmbeddings:
    def test_google_provider_is_pinned_to_configured_dimension(self) -> None:
        settings = LLMSettings(embedding_provider="google", embedding_dimension=8, google_api_key="test-key")

        embeddings = create_embeddings(settings)

        assert isinstance(embeddings, FixedDimensionEmbeddings)
        assert embeddings.pinned_dimension == 8

    def test_unknown_provider_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            create_embeddings(LLMSettings(embedding_provider="openai"))


class TestFixedDimensionEmbeddings:
    async def test_async_calls_pass_task_type_and_dimension(self, recorded_calls) -> None:
        # Arrange
        embeddings = FixedDimensionEmbeddings(
            model="models/gemini-embedding-001", google_api_key="test-key", pinned_dimension=8
        )

        # Act
        documents = await embeddings.aembed_documents(["a", "b"])
        query = await embeddings.aembed_query("q")

        # Assert
        assert [len(vector) for vector in documents] == [8, 8]
        assert len(query) == 8
        assert recorded_calls == [
            ("documents", {"task_type": "RETRIEVAL_DOCUMENT", "output_dimensionality": 8}),
            ("query", {"task_type": "RETRIEVAL_QUERY", "output_dimensionality": 8}),
        ]
