"""
Embedding provider construction.

Google embeddings are pinned to the pipeline-wide dimension through
FixedDimensionEmbeddings; Bedrock Titan takes the dimension as a model
kwarg.

Dependencies: langchain_google_genai, langchain_aws
System role: Embedding capability for chunks and queries
"""

import logging

from fastapi.concurrency import run_in_threadpool
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from spacerag.configs.llm import LLMSettings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    Google embeddings pinned to the pipeline-wide dimension.

    EmbeddingGenerator only awaits the async methods; they run the
    blocking client in a worker thread with retrieval task types and an
    explicit output_dimensionality, which the base class does not take
    from its constructor.
    """

    pinned_dimension: int = 1536

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return await run_in_threadpool(
            super().embed_documents,
            texts,
            task_type="RETRIEVAL_DOCUMENT",
            output_dimensionality=self.pinned_dimension,
        )

    async def aembed_query(self, text: str) -> list[float]:
        return await run_in_threadpool(
            super().embed_query,
            text,
            task_type="RETRIEVAL_QUERY",
            output_dimensionality=self.pinned_dimension,
        )


def create_embeddings(settings: LLMSettings) -> Embeddings:
    """
    Build the configured embedding provider.

    Raises:
        ValueError: Unknown provider
    """
    provider = settings.embedding_provider.lower()
    logger.info(
        f"{__name__}:create_embeddings - provider={provider}, model={settings.embedding_model}, "
        f"dimension={settings.embedding_dimension}"
    )
    if provider == "google":
        kwargs = {"google_api_key": settings.google_api_key} if settings.google_api_key else {}
        return FixedDimensionEmbeddings(
            model=settings.embedding_model,
            pinned_dimension=settings.embedding_dimension,
            **kwargs,
        )
    if provider == "bedrock":
        from langchain_aws import BedrockEmbeddings

        return BedrockEmbeddings(
            model_id=settings.embedding_model,
            region_name=settings.region,
            model_kwargs={"dimensions": settings.embedding_dimension, "normalize": True},
        )
    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")
