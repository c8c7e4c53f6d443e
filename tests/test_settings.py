"""
Tests for settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from spacerag.configs import Settings
from spacerag.configs.database import DatabaseSettings
from spacerag.configs.vector_store import VectorStoreSettings
from spacerag.core.document_processing.configs import DocumentPipelineSettings


class TestSettings:
    def test_log_level_is_normalized(self) -> None:
        assert Settings(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="loud")

    def test_nested_settings_read_their_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("VECTOR_STORE_TOP_K", "8")
        monkeypatch.setenv("DOC_PIPELINE_CHUNK_SIZE", "500")

        settings = Settings()

        assert settings.vector_store.top_k == 8
        assert settings.pipeline.chunk_size == 500


class TestDatabaseSettings:
    def test_url_built_from_parts(self) -> None:
        settings = DatabaseSettings(url=None, host="db", port=5433, user="u", password="p", db="rag", sslmode="require")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5433/rag?ssl=require"
        assert settings.is_sqlite is False

    def test_url_override_wins(self) -> None:
        settings = DatabaseSettings(url="sqlite+aiosqlite:///:memory:")

        assert settings.async_database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.is_sqlite is True


@pytest.mark.parametrize(
    ("factory", "kwargs"),
    [
        (DocumentPipelineSettings, {"chunk_size": 100, "chunk_overlap": 100}),
        (VectorStoreSettings, {"similarity_threshold": 1.5}),
        (VectorStoreSettings, {"top_k": 0}),
        (VectorStoreSettings, {"top_k": 150}),
    ],
)
def test_invalid_combinations_are_rejected(factory, kwargs) -> None:
    with pytest.raises(ValidationError):
        factory(**kwargs)
