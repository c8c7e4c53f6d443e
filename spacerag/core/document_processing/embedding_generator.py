"""
Batched embedding generation with vector validation.

Wraps a langchain-core Embeddings provider: texts are embedded in
fixed-size batches with a pause between batches, every call is bounded
by a timeout, and each returned vector is checked for the configured
dimension and finite components before anyone persists it.

Dependencies: langchain_core
System role: Embedding Generator for the Embed stage and query embedding
"""

import asyncio
import logging
import math
from typing import AsyncIterator, Awaitable, Callable, Sequence

from langchain_core.embeddings import Embeddings

from spacerag.core.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)

Vector = list[float]


class EmbeddingGenerator:
    """Turns texts into validated fixed-dimension vectors."""

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        batch_size: int = 100,
        batch_delay_seconds: float = 0.1,
        timeout_seconds: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if dimension < 1:
            raise ValueError("dimension must be positive")
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._embeddings = embeddings
        self.dimension = dimension
        self.batch_size = batch_size
        self._batch_delay = batch_delay_seconds
        self._timeout = timeout_seconds
        self._sleep = sleep

    def is_valid(self, vector: Sequence[float] | None) -> bool:
        """Correct dimension and every component a finite number."""
        if vector is None or len(vector) != self.dimension:
            return False
        try:
            return all(math.isfinite(float(component)) for component in vector)
        except (TypeError, ValueError):
            return False

    async def embed_query(self, text: str) -> Vector:
        """
        Embed a single query string.

        Raises:
            EmbeddingProviderError: Provider failure, timeout or invalid vector
        """
        vector = await self._call(self._embeddings.aembed_query(text), "embed_query")
        if not self.is_valid(vector):
            raise EmbeddingProviderError(
                "Query embedding failed validation",
                details={"dimension": len(vector) if vector is not None else None},
            )
        return [float(component) for component in vector]

    async def embed_batch(self, texts: Sequence[str]) -> list[Vector]:
        """
        One provider call for a batch of texts, without validation.

        Raises:
            EmbeddingProviderError: Provider failure, timeout or wrong result count
        """
        vectors = await self._call(self._embeddings.aembed_documents(list(texts)), "embed_batch")
        if len(vectors) != len(texts):
            raise EmbeddingProviderError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    async def iter_batches(
        self, texts: Sequence[str]
    ) -> AsyncIterator[tuple[int, list[Vector | None]]]:
        """
        Yield (batch_start, validated vectors) per batch, pausing between batches.

        Invalid vectors come back as None and are logged.
        """
        for batch_start in range(0, len(texts), self.batch_size):
            if batch_start > 0 and self._batch_delay > 0:
                await self._sleep(self._batch_delay)
            batch = texts[batch_start:batch_start + self.batch_size]
            results: list[Vector | None] = []
            for offset, vector in enumerate(await self.embed_batch(batch)):
                if self.is_valid(vector):
                    results.append([float(component) for component in vector])
                else:
                    logger.warning(
                        f"{__name__}:iter_batches - Skipping invalid vector",
                        extra={
                            "position": batch_start + offset,
                            "dimension": len(vector) if vector is not None else None,
                            "expected_dimension": self.dimension,
                        },
                    )
                    results.append(None)
            yield batch_start, results

    async def _call(self, coro, operation: str):
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise EmbeddingProviderError(
                f"Embedding provider timed out after {self._timeout}s",
                details={"operation": operation},
            ) from e
        except EmbeddingProviderError:
            raise
        except Exception as e:
            message = str(e)
            rate_limited = "429" in message or "rate" in message.lower()
            raise EmbeddingProviderError(
                f"Embedding provider error: {message}",
                details={"operation": operation, "rate_limited": rate_limited},
            ) from e
