"""
Application service container.

Every capability client (database, blob storage, parser HTTP client,
embedding and chat models, task runner, pipeline) is built once at
process start and handed to the request-scoped services. Tests build
the container with fakes in place of the providers.

Dependencies: spacerag.configs, spacerag.boundary, spacerag.core
System role: Explicit dependency wiring
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import httpx
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from spacerag.application.rate_limit import RateLimiter
from spacerag.boundary.db.connection import create_engine_from_settings, create_session_factory
from spacerag.boundary.llm import create_chat_model, create_embeddings
from spacerag.boundary.parser import UnstructuredParser
from spacerag.boundary.storage import BlobStorage, create_blob_storage
from spacerag.boundary.vdb import create_similarity_index
from spacerag.configs import Settings
from spacerag.core.document_processing.embedding_generator import EmbeddingGenerator
from spacerag.core.document_processing.entrypoint import DocumentPipeline, SyncScheduler
from spacerag.core.document_processing.status_manager import DocumentStatusManager
from spacerag.core.document_processing.task_runner import TaskRunner
from spacerag.core.document_processing.tasks import (
    ChunkingTask,
    EmbeddingTask,
    ExtractionTask,
    TextExtractor,
)
from spacerag.core.document_processing.text_splitter import TextChunker
from spacerag.core.rag_query import AnswerSynthesizer, VectorRetriever
from spacerag.observability.langfuse_tracer import LangfuseTracer

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Process-wide capability clients and core components."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    storage: BlobStorage
    http_client: httpx.AsyncClient
    runner: TaskRunner
    pipeline: DocumentPipeline
    retriever: VectorRetriever
    synthesizer: AnswerSynthesizer
    rate_limiter: RateLimiter
    tracer: LangfuseTracer
    scheduler: SyncScheduler
    owns_http_client: bool = field(default=True)

    async def aclose(self) -> None:
        """Stop background work and release clients."""
        await self.scheduler.stop()
        await self.runner.shutdown()
        if self.owns_http_client:
            await self.http_client.aclose()
        self.tracer.flush()
        await self.engine.dispose()
        logger.info(f"{__name__}:aclose - Service container closed")


def build_container(
    settings: Settings,
    *,
    engine: AsyncEngine | None = None,
    embeddings: Embeddings | None = None,
    chat_model: BaseChatModel | None = None,
    storage: BlobStorage | None = None,
    http_client: httpx.AsyncClient | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ServiceContainer:
    """
    Wire every component from settings.

    Args:
        settings: Application settings
        engine: Pre-built engine (tests share one in-memory database)
        embeddings: Embedding provider override
        chat_model: Chat model override
        storage: Blob storage override
        http_client: HTTP client override for the document parser
        sleep: Sleep used by retries and batch pauses

    Returns:
        ServiceContainer: Ready-to-use container
    """
    engine = engine or create_engine_from_settings(settings.database)
    session_factory = create_session_factory(engine)
    storage = storage or create_blob_storage(settings.blob_storage)
    owns_http_client = http_client is None
    http_client = http_client or httpx.AsyncClient(timeout=settings.parser.timeout_seconds)
    embeddings = embeddings or create_embeddings(settings.llm)
    chat_model = chat_model or create_chat_model(settings.llm)

    pipeline_settings = settings.pipeline
    generator = EmbeddingGenerator(
        embeddings,
        dimension=settings.llm.embedding_dimension,
        batch_size=pipeline_settings.embedding_batch_size,
        batch_delay_seconds=pipeline_settings.embedding_batch_delay_seconds,
        timeout_seconds=settings.llm.embedding_timeout_seconds,
        sleep=sleep,
    )
    binary_parser = UnstructuredParser(settings.parser, http_client)
    status_manager = DocumentStatusManager(session_factory)
    runner = TaskRunner(sleep=sleep)
    pipeline = DocumentPipeline(
        session_factory=session_factory,
        runner=runner,
        status_manager=status_manager,
        extraction_task=ExtractionTask(session_factory, storage, TextExtractor(binary_parser)),
        chunking_task=ChunkingTask(
            session_factory,
            TextChunker(
                chunk_size=pipeline_settings.chunk_size,
                chunk_overlap=pipeline_settings.chunk_overlap,
                chars_per_token=pipeline_settings.chars_per_token,
            ),
        ),
        embedding_task=EmbeddingTask(session_factory, generator, status_manager),
        settings=pipeline_settings,
    )

    tracer = LangfuseTracer(settings.observability)
    retriever = VectorRetriever(
        session_factory,
        generator,
        create_similarity_index(settings.vector_store, is_sqlite=settings.database.is_sqlite),
        settings.vector_store,
        excerpt_chars=settings.chat.excerpt_chars,
    )
    synthesizer = AnswerSynthesizer(
        chat_model,
        model_name=settings.llm.chat_model,
        timeout_seconds=settings.llm.chat_timeout_seconds,
        tracer=tracer,
    )

    logger.info(
        f"{__name__}:build_container - Services wired",
        extra={
            "vector_store": settings.vector_store.store_type,
            "blob_provider": settings.blob_storage.provider,
            "remote_parser": bool(settings.parser.api_key),
            "tracing": tracer.enabled,
        },
    )
    return ServiceContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        storage=storage,
        http_client=http_client,
        runner=runner,
        pipeline=pipeline,
        retriever=retriever,
        synthesizer=synthesizer,
        rate_limiter=RateLimiter.from_settings(settings.chat),
        tracer=tracer,
        scheduler=SyncScheduler(pipeline, pipeline_settings.sync_interval_seconds),
        owns_http_client=owns_http_client,
    )
