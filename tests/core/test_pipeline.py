"""
Tests for DocumentPipeline.

Runs the real stages against the in-memory database with fake
embeddings: happy path, resume, permanent and transient failures,
idempotent embedding, reprocess and sync.
"""

import asyncio
import json
import logging
import math

import httpx
import pytest

from spacerag.api.deps.container import build_container
from spacerag.boundary.db.models import DocumentStatus
from spacerag.core.document_processing.embedding_generator import EmbeddingGenerator
from spacerag.core.document_processing.entrypoint import DocumentPipeline
from spacerag.core.document_processing.status_manager import DocumentStatusManager
from spacerag.core.document_processing.tasks import EmbeddingTask

from tests.factories import get_chunks, get_document, make_chunks, make_document, make_space
from tests.fakes import DIMENSION, FakeChatModel, FakeEmbeddings, keyword_vector, no_sleep

PYTHON_TEXT = "Python is a programming language.\n\nIt is popular for data pipeline work."
THREE_TOPICS_TEXT = (
    "Python is a programming language that people use for scripting, data pipelines, "
    "web services and for teaching new programmers.\n\n"
    "The ocean covers most of the planet and holds deep trenches, coral reefs, "
    "drifting plankton and whales that cross whole basins.\n\n"
    "Gardens need sunlight, steady watering and good soil, and tomatoes, beans and "
    "herbs grow well when the beds are weeded every week."
)


@pytest.fixture
def pipeline(container) -> DocumentPipeline:
    return container.pipeline


@pytest.fixture
async def space(session_factory):
    return await make_space(session_factory)


class TestPipelineProcess:
    """Test suite for DocumentPipeline.process()."""

    async def test_inline_text_reaches_ready_with_embedded_chunks(self, session_factory, pipeline, space) -> None:
        # Arrange
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)

        # Act
        result = await pipeline.process(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        chunks = await get_chunks(session_factory, document.id)
        assert result.status == DocumentStatus.READY.value
        assert result.failed_stage is None
        assert stored.processing_status == DocumentStatus.READY
        assert stored.processing_error is None
        assert stored.chunk_count == len(chunks) >= 1
        assert all(chunk.embedding is not None and len(chunk.embedding) == DIMENSION for chunk in chunks)
        assert stored.document_metadata["extraction"]["element_count"] == 2

    async def test_invalid_vector_is_skipped_and_document_still_ready(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings, caplog
    ) -> None:
        # Arrange
        fake_embeddings.marker_vectors = {"trenches": [math.nan] * DIMENSION, "tomatoes": [1.0, 2.0]}
        document = await make_document(session_factory, space.id, content=THREE_TOPICS_TEXT)

        # Act
        with caplog.at_level(logging.WARNING, logger="spacerag.core.document_processing.embedding_generator"):
            result = await pipeline.process(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        chunks = await get_chunks(session_factory, document.id)
        assert result.status == DocumentStatus.READY.value
        assert stored.chunk_count == len(chunks) == 3
        embedded = {chunk.content.split()[0]: chunk.embedding is not None for chunk in chunks}
        assert embedded == {"Python": True, "The": False, "Gardens": False}
        assert len([r for r in caplog.records if "Skipping invalid vector" in r.getMessage()]) == 2

    async def test_text_file_is_read_from_blob_storage(self, session_factory, pipeline, space, blob_storage) -> None:
        # Arrange
        stored_object = await blob_storage.put(b"# Ocean notes\n\nThe ocean is deep.", "spaces/s/notes.md", "text/markdown")
        document = await make_document(
            session_factory,
            space.id,
            file_key=stored_object.key,
            file_url=stored_object.url,
            file_mime_type="text/markdown",
            file_size=stored_object.size,
        )

        # Act
        result = await pipeline.process(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        assert result.status == DocumentStatus.READY.value
        assert "The ocean is deep." in stored.content
        assert stored.document_metadata["extraction"]["page_spans"] == []

    async def test_missing_input_is_permanent_error_at_extract(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings
    ) -> None:
        """No file and no text fails once at Extract, never reaching Embed."""
        # Arrange
        document = await make_document(session_factory, space.id, content="")

        # Act
        result = await pipeline.process(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        assert result.failed_stage == "extract"
        assert stored.processing_status == DocumentStatus.ERROR
        assert stored.processing_error["stage"] == "extract"
        assert "neither a file nor text" in stored.processing_error["message"]
        assert fake_embeddings.document_calls == []

    async def test_unsupported_mime_type_is_permanent_error(self, session_factory, pipeline, space) -> None:
        document = await make_document(
            session_factory,
            space.id,
            file_key="spaces/s/photo.png",
            file_mime_type="image/png",
        )

        await pipeline.process(document.id)

        stored = await get_document(session_factory, document.id)
        assert stored.processing_status == DocumentStatus.ERROR
        assert stored.processing_error["message"] == "Unsupported file type: image/png"

    async def test_embedding_failures_exhaust_retries_then_error(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings
    ) -> None:
        """A provider that keeps failing is retried up to the cap, then the document is ERROR."""
        # Arrange
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)
        fake_embeddings.error = RuntimeError("503 Service Unavailable")

        # Act
        result = await pipeline.process(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        assert result.failed_stage == "embed"
        assert len(fake_embeddings.document_calls) == 3
        assert stored.processing_status == DocumentStatus.ERROR
        assert stored.processing_error["stage"] == "embed"
        assert stored.processing_error["message"].startswith("Embedding provider error")

    async def test_transient_embedding_failure_recovers(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings
    ) -> None:
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)
        fake_embeddings.fail_times = 2

        result = await pipeline.process(document.id)

        assert result.status == DocumentStatus.READY.value
        assert len(fake_embeddings.document_calls) == 3

    async def test_resumes_from_current_stage(self, session_factory, pipeline, space) -> None:
        """A document already in CHUNKING skips extraction."""
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT, status=DocumentStatus.CHUNKING)

        result = await pipeline.process(document.id)

        stored = await get_document(session_factory, document.id)
        assert result.status == DocumentStatus.READY.value
        assert "extraction" not in stored.document_metadata

    @pytest.mark.parametrize("status", [DocumentStatus.READY, DocumentStatus.ERROR])
    async def test_terminal_documents_are_left_alone(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings, status: DocumentStatus
    ) -> None:
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT, status=status)

        result = await pipeline.process(document.id)

        assert result.status == status.value
        assert fake_embeddings.document_calls == []

    async def test_concurrent_runs_of_one_document_are_serialized(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings
    ) -> None:
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)

        first, second = await asyncio.gather(pipeline.process(document.id), pipeline.process(document.id))

        assert first.status == second.status == DocumentStatus.READY.value
        assert len(fake_embeddings.document_calls) == 1
        assert pipeline.is_running(document.id) is False


class TestEmbeddingTaskIdempotence:
    """Re-running Embed only touches chunks without vectors."""

    @pytest.fixture
    def embedding_task(self, session_factory, fake_embeddings: FakeEmbeddings) -> EmbeddingTask:
        generator = EmbeddingGenerator(fake_embeddings, dimension=DIMENSION, batch_size=10, sleep=no_sleep)
        return EmbeddingTask(session_factory, generator, DocumentStatusManager(session_factory))

    async def test_fully_embedded_document_short_circuits_to_ready(
        self, session_factory, space, embedding_task: EmbeddingTask, fake_embeddings: FakeEmbeddings
    ) -> None:
        # Arrange
        document = await make_document(session_factory, space.id, content="python", status=DocumentStatus.EMBEDDING)
        await make_chunks(session_factory, document.id, [("python", keyword_vector("python"))])

        # Act
        result = await embedding_task.run(document.id)

        # Assert
        stored = await get_document(session_factory, document.id)
        assert result.short_circuited is True
        assert fake_embeddings.document_calls == []
        assert stored.processing_status == DocumentStatus.READY
        assert stored.chunk_count == 1

    async def test_only_pending_chunks_are_embedded(
        self, session_factory, space, embedding_task: EmbeddingTask, fake_embeddings: FakeEmbeddings
    ) -> None:
        document = await make_document(session_factory, space.id, content="x", status=DocumentStatus.EMBEDDING)
        await make_chunks(
            session_factory,
            document.id,
            [("python done", keyword_vector("python")), ("ocean pending", None)],
        )

        result = await embedding_task.run(document.id)

        assert fake_embeddings.document_calls == [["ocean pending"]]
        assert result.embedded == 1
        assert all(chunk.embedding is not None for chunk in await get_chunks(session_factory, document.id))


class TestPipelineReprocessAndSync:
    async def test_reprocess_replaces_chunks(self, session_factory, pipeline, space) -> None:
        # Arrange
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)
        await pipeline.process(document.id)
        old_ids = {chunk.id for chunk in await get_chunks(session_factory, document.id)}

        # Act
        handle = await pipeline.reprocess(document.id)
        outcome = await handle

        # Assert
        new_chunks = await get_chunks(session_factory, document.id)
        stored = await get_document(session_factory, document.id)
        assert outcome.ok is True
        assert stored.processing_status == DocumentStatus.READY
        assert new_chunks and old_ids.isdisjoint({chunk.id for chunk in new_chunks})

    async def test_reprocess_recovers_errored_document(
        self, session_factory, pipeline, space, fake_embeddings: FakeEmbeddings
    ) -> None:
        document = await make_document(session_factory, space.id, content=PYTHON_TEXT)
        fake_embeddings.error = RuntimeError("503")
        await pipeline.process(document.id)
        fake_embeddings.error = None

        await (await pipeline.reprocess(document.id))

        stored = await get_document(session_factory, document.id)
        assert stored.processing_status == DocumentStatus.READY
        assert stored.processing_error is None

    async def test_sync_triggers_uploaded_documents_only(self, session_factory, container, space) -> None:
        # Arrange
        first = await make_document(session_factory, space.id, content="python one")
        second = await make_document(session_factory, space.id, content="python two")
        ready = await make_document(session_factory, space.id, content="python three", status=DocumentStatus.READY)

        # Act
        triggered = await container.pipeline.sync_uploaded(space.id)
        await container.runner.drain()

        # Assert
        assert set(triggered) == {first.id, second.id}
        assert ready.id not in triggered
        for document_id in (first.id, second.id):
            assert (await get_document(session_factory, document_id)).processing_status == DocumentStatus.READY


class TestPipelineRemoteParser:
    async def test_pdf_pages_flow_into_chunk_metadata(self, settings, engine, session_factory, blob_storage) -> None:
        """PDF elements from the partition API carry page numbers onto the chunks."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["unstructured-api-key"] == "test-key"
            return httpx.Response(
                200,
                content=json.dumps([
                    {"type": "Title", "text": "Galaxy survey", "metadata": {"page_number": 1}},
                    {"type": "NarrativeText", "text": "Galaxies cluster.", "metadata": {"page_number": 2}},
                ]),
            )

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        container = build_container(
            settings,
            engine=engine,
            embeddings=FakeEmbeddings(),
            chat_model=FakeChatModel(),
            storage=blob_storage,
            http_client=http_client,
            sleep=no_sleep,
        )
        space = await make_space(session_factory)
        stored_object = await blob_storage.put(b"%PDF-1.4 fake", "spaces/s/survey.pdf", "application/pdf")
        document = await make_document(
            session_factory,
            space.id,
            file_key=stored_object.key,
            file_mime_type="application/pdf",
        )

        # Act
        try:
            result = await container.pipeline.process(document.id)
        finally:
            await http_client.aclose()

        # Assert
        stored = await get_document(session_factory, document.id)
        chunks = await get_chunks(session_factory, document.id)
        assert result.status == DocumentStatus.READY.value
        assert stored.document_metadata["extraction"]["page_count"] == 2
        assert chunks[0].chunk_metadata["page_numbers"] == [1, 2]
