"""
Models for document processing pipeline.

Exports: Chunk, PipelineResult, ExtractionResult, EmbeddingResult
"""

from .chunk import Chunk
from .pipeline_result import EmbeddingResult, ExtractionResult, PipelineResult

__all__ = [
    "Chunk",
    "PipelineResult",
    "ExtractionResult",
    "EmbeddingResult",
]
