"""
Document pipeline coordinator.

Drives a document through Extract -> Chunk -> Embed -> READY. Each
stage is registered with the TaskRunner under its own RetryPolicy and
a failure hook that persists {stage, message, timestamp} and moves the
document to ERROR. All state lives on the document row, so a run
resumes from whatever stage the row says it is in.

Runs for the same document are serialized with a per-document lock;
different documents progress concurrently.

Dependencies: task_runner, status_manager, tasks
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
import uuid
import weakref
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.db.CRUD import document_crud
from spacerag.boundary.db.models import DocumentStatus
from spacerag.core.exceptions import NotFoundError, SpaceRAGException
from spacerag.observability.correlation import bind_correlation_id, reset_correlation_id
from spacerag.observability.log_utils import log_exception_with_context

from .configs import DocumentPipelineSettings
from .models import PipelineResult
from .retry_policy import RetryPolicy
from .status_manager import DocumentStatusManager
from .task_runner import TaskRunner
from .tasks import ChunkingTask, EmbeddingTask, ExtractionTask

logger = logging.getLogger(__name__)

PROCESS_TASK_ID = "document.process"

STAGE_EXTRACT = "extract"
STAGE_CHUNK = "chunk"
STAGE_EMBED = "embed"
STAGES = [STAGE_EXTRACT, STAGE_CHUNK, STAGE_EMBED]

# Stage a run resumes at, keyed by the document's current status
RESUME_STAGE = {
    DocumentStatus.UPLOADED: STAGE_EXTRACT,
    DocumentStatus.EXTRACTING: STAGE_EXTRACT,
    DocumentStatus.CHUNKING: STAGE_CHUNK,
    DocumentStatus.EMBEDDING: STAGE_EMBED,
}


def stage_task_id(stage: str) -> str:
    return f"document.{stage}"


class DocumentPipeline:
    """Orchestrate document ingestion: extract -> chunk -> embed -> ready."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        runner: TaskRunner,
        status_manager: DocumentStatusManager,
        extraction_task: ExtractionTask,
        chunking_task: ChunkingTask,
        embedding_task: EmbeddingTask,
        settings: DocumentPipelineSettings,
    ) -> None:
        """
        Register every stage with the runner.

        Args:
            session_factory: Async session factory for document reads
            runner: Task runner that executes and retries stages
            status_manager: State machine writer
            extraction_task: Extract stage
            chunking_task: Chunk stage
            embedding_task: Embed stage (handles its own EMBEDDING/READY transitions)
            settings: Per-stage retry settings
        """
        self._session_factory = session_factory
        self._runner = runner
        self._status = status_manager
        self._locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = weakref.WeakValueDictionary()

        handlers: dict[str, Callable[[uuid.UUID], Awaitable[Any]]] = {
            STAGE_EXTRACT: self._entering(DocumentStatus.EXTRACTING, extraction_task.run),
            STAGE_CHUNK: self._entering(DocumentStatus.CHUNKING, chunking_task.run),
            STAGE_EMBED: embedding_task.run,
        }
        policies = {
            STAGE_EXTRACT: RetryPolicy.from_settings(settings.extract_retry),
            STAGE_CHUNK: RetryPolicy.from_settings(settings.chunk_retry),
            STAGE_EMBED: RetryPolicy.from_settings(settings.embed_retry),
        }
        for stage in STAGES:
            runner.register(
                stage_task_id(stage),
                handlers[stage],
                policies[stage],
                on_failure=self._failure_hook(stage),
            )
        runner.register(PROCESS_TASK_ID, self.process, RetryPolicy.no_retry())

    def _entering(self, status: DocumentStatus, run: Callable[[uuid.UUID], Awaitable[Any]]):
        async def handler(document_id: uuid.UUID) -> Any:
            await self._status.enter_stage(document_id, status)
            return await run(document_id)

        return handler

    def _failure_hook(self, stage: str):
        async def on_failure(document_id: uuid.UUID, exc: BaseException) -> None:
            message = exc.message if isinstance(exc, SpaceRAGException) else str(exc) or type(exc).__name__
            await self._status.mark_failed(document_id, stage, message)

        return on_failure

    def _lock_for(self, document_id: uuid.UUID) -> asyncio.Lock:
        lock = self._locks.get(document_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[document_id] = lock
        return lock

    def is_running(self, document_id: uuid.UUID) -> bool:
        lock = self._locks.get(document_id)
        return lock is not None and lock.locked()

    async def _snapshot(self, document_id: uuid.UUID) -> tuple[str, int | None]:
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                raise NotFoundError("document", document_id)
            return document.processing_status.value, document.chunk_count

    async def process(self, document_id: uuid.UUID) -> PipelineResult:
        """
        Run the remaining stages of a document in order.

        Stages execute strictly sequentially; a stage that gives up ends
        the run (the failure hook has already recorded ERROR). READY and
        ERROR documents are left untouched.

        Args:
            document_id: Document to process

        Returns:
            PipelineResult: Final status, chunk count and failing stage if any

        Raises:
            NotFoundError: Document does not exist
        """
        _, token = bind_correlation_id(f"doc-{document_id}")
        start_time = time.perf_counter()
        try:
            async with self._lock_for(document_id):
                status = await self._status.get_status(document_id)
                first_stage = RESUME_STAGE.get(status)
                if first_stage is None:
                    logger.info(
                        f"{__name__}:process - Nothing to do for {status.value} document",
                        extra={"document_id": str(document_id), "status": status.value},
                    )
                    return await self._result(document_id, start_time)

                logger.info(
                    f"{__name__}:process - Starting pipeline at {first_stage}",
                    extra={"document_id": str(document_id), "status": status.value},
                )
                for stage in STAGES[STAGES.index(first_stage):]:
                    outcome = await self._runner.trigger_and_wait(stage_task_id(stage), document_id)
                    if not outcome.ok:
                        return await self._result(document_id, start_time, stage, outcome.error)

                result = await self._result(document_id, start_time)
                logger.info(
                    f"{__name__}:process - Pipeline complete",
                    extra={
                        "document_id": str(document_id),
                        "chunk_count": result.chunk_count,
                        "processing_time_ms": result.processing_time_ms,
                    },
                )
                return result
        finally:
            reset_correlation_id(token)

    async def _result(
        self,
        document_id: uuid.UUID,
        start_time: float,
        failed_stage: str | None = None,
        error: BaseException | None = None,
    ) -> PipelineResult:
        try:
            status, chunk_count = await self._snapshot(document_id)
        except NotFoundError:
            # Deleted mid-run (space deletion cascades)
            status, chunk_count = DocumentStatus.ERROR.value, None
        return PipelineResult(
            document_id=document_id,
            status=status,
            chunk_count=chunk_count,
            failed_stage=failed_stage,
            error=str(error) if error is not None else None,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def start(self, document_id: uuid.UUID) -> asyncio.Task:
        """
        Process a document in the background.

        Returns:
            asyncio.Task: Handle resolving to the runner's TaskRunResult
        """
        return self._runner.trigger(PROCESS_TASK_ID, document_id)

    async def reprocess(self, document_id: uuid.UUID) -> asyncio.Task:
        """
        Reset a document to UPLOADED and run it again from Extract.

        Waits for any in-flight run of the same document before resetting.

        Raises:
            NotFoundError: Document does not exist
        """
        async with self._lock_for(document_id):
            await self._status.reset(document_id)
        return self.start(document_id)

    async def sync_uploaded(self, space_id: uuid.UUID | None = None) -> list[uuid.UUID]:
        """
        Re-trigger every document sitting in UPLOADED.

        Documents with a run already in progress are skipped, so the pass
        is safe to repeat.

        Args:
            space_id: Restrict to one space (all spaces when None)

        Returns:
            list[uuid.UUID]: Documents that were triggered
        """
        async with self._session_factory() as session:
            document_ids = await document_crud.get_ids_by_status(
                session, DocumentStatus.UPLOADED, space_id=space_id
            )

        triggered = [document_id for document_id in document_ids if not self.is_running(document_id)]
        for document_id in triggered:
            self.start(document_id)

        logger.info(
            f"{__name__}:sync_uploaded - Triggered {len(triggered)} document(s)",
            extra={
                "space_id": str(space_id) if space_id else None,
                "found": len(document_ids),
                "triggered": len(triggered),
            },
        )
        return triggered


class SyncScheduler:
    """Runs DocumentPipeline.sync_uploaded on a fixed interval."""

    def __init__(self, pipeline: DocumentPipeline, interval_seconds: float) -> None:
        self._pipeline = pipeline
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self._interval > 0

    def start(self) -> None:
        if self.enabled and self._task is None:
            self._task = asyncio.create_task(self._loop(), name="document-sync")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._pipeline.sync_uploaded()
            except Exception as e:
                log_exception_with_context(logger, f"{__name__}:_loop - Scheduled sync failed", e)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
