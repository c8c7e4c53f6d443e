"""
Shared test fixtures and configuration for entire test suite.

Provides: file-backed SQLite database per test, test settings, fake model
providers and a fully wired ServiceContainer.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from pathlib import Path

import pytest

from spacerag.api.deps.container import ServiceContainer, build_container
from spacerag.boundary.db.connection import create_engine_from_settings, create_session_factory
from spacerag.boundary.db.create_tables import create_tables
from spacerag.boundary.storage import LocalBlobStorage
from spacerag.configs import Settings
from spacerag.configs.chat import ChatSettings
from spacerag.configs.database import DatabaseSettings
from spacerag.configs.llm import LLMSettings
from spacerag.configs.observability import ObservabilitySettings
from spacerag.configs.parser import ParserSettings
from spacerag.configs.storage import BlobStorageSettings
from spacerag.configs.vector_store import VectorStoreSettings
from spacerag.core.document_processing.configs import DocumentPipelineSettings, StageRetrySettings

from tests.fakes import DIMENSION, FakeChatModel, FakeEmbeddings, no_sleep


def _fast_retry(max_attempts: int) -> StageRetrySettings:
    return StageRetrySettings(max_attempts=max_attempts, base_delay=0.0, max_delay=0.0, jitter=0.0)


def make_settings(tmp_path: Path) -> Settings:
    """Settings for local runs: SQLite, numpy scoring, local blobs, no tracing."""
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'spacerag.db'}", auto_create_tables=True),
        vector_store=VectorStoreSettings(store_type="numpy", top_k=5, similarity_threshold=0.7),
        llm=LLMSettings(
            chat_model="fake-chat",
            embedding_dimension=DIMENSION,
            embedding_timeout_seconds=5.0,
            chat_timeout_seconds=5.0,
        ),
        blob_storage=BlobStorageSettings(provider="local", local_root=str(tmp_path / "blobs")),
        parser=ParserSettings(api_key="test-key", api_url="https://parser.test/general/v0/general"),
        pipeline=DocumentPipelineSettings(
            chunk_size=200,
            chunk_overlap=20,
            embedding_batch_size=2,
            embedding_batch_delay_seconds=0.0,
            extract_retry=_fast_retry(3),
            chunk_retry=_fast_retry(3),
            embed_retry=_fast_retry(3),
            sync_interval_seconds=0.0,
        ),
        chat=ChatSettings(history_exchanges=5),
        observability=ObservabilitySettings(enable_tracing=False),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
async def engine(settings: Settings):
    """
    Create a per-test SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of the test
    """
    engine = create_engine_from_settings(settings.database)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def fake_chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def blob_storage(tmp_path: Path) -> LocalBlobStorage:
    return LocalBlobStorage(tmp_path / "blobs")


@pytest.fixture
async def container(
    settings: Settings,
    engine,
    fake_embeddings: FakeEmbeddings,
    fake_chat_model: FakeChatModel,
    blob_storage: LocalBlobStorage,
) -> ServiceContainer:
    """ServiceContainer over the shared engine with fake providers and no retry waits."""
    container = build_container(
        settings,
        engine=engine,
        embeddings=fake_embeddings,
        chat_model=fake_chat_model,
        storage=blob_storage,
        sleep=no_sleep,
    )
    yield container
    await container.runner.shutdown()
    await container.http_client.aclose()
