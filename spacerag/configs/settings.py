"""
Top-level Settings.

Each concern reads its own env prefix (POSTGRES_, VECTOR_STORE_, LLM_,
BLOB_, UNSTRUCTURED_, DOC_PIPELINE_, CHAT_, LANGFUSE_); the process-wide
ENVIRONMENT and LOG_LEVEL sit on the root.
"""

from functools import lru_cache

from pydantic import Field

from spacerag.configs.base import BaseSettings
from spacerag.configs.chat import ChatSettings
from spacerag.configs.database import DatabaseSettings
from spacerag.configs.llm import LLMSettings
from spacerag.configs.observability import ObservabilitySettings
from spacerag.configs.parser import ParserSettings
from spacerag.configs.storage import BlobStorageSettings
from spacerag.configs.vector_store import VectorStoreSettings
from spacerag.core.document_processing.configs import DocumentPipelineSettings


class Settings(BaseSettings):
    """Everything build_container needs to wire the app."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    pipeline: DocumentPipelineSettings = Field(default_factory=DocumentPipelineSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process; build_container and the lifespan share it."""
    return Settings()
