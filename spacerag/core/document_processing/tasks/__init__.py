"""
Document processing stage tasks.

Exports: ExtractionTask, TextExtractor, ChunkingTask, EmbeddingTask
"""

from .chunking_task import ChunkingTask
from .embedding_task import EmbeddingTask
from .extraction_task import SUPPORTED_MIME_TYPES, ExtractionTask, TextExtractor, is_supported_mime_type

__all__ = [
    "ExtractionTask",
    "TextExtractor",
    "ChunkingTask",
    "EmbeddingTask",
    "SUPPORTED_MIME_TYPES",
    "is_supported_mime_type",
]
