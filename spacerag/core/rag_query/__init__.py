"""RAG query business logic: retrieval, prompt assembly and answer synthesis."""

from .answer_synthesizer import AnswerSynthesizer, SynthesizedAnswer
from .context_builder import ConversationContextBuilder, format_context
from .rag_prompt import NOT_FOUND_ANSWER, RAG_PROMPT
from .retriever import RetrievedChunk, VectorRetriever, build_excerpt

__all__ = [
    "AnswerSynthesizer",
    "SynthesizedAnswer",
    "ConversationContextBuilder",
    "format_context",
    "NOT_FOUND_ANSWER",
    "RAG_PROMPT",
    "RetrievedChunk",
    "VectorRetriever",
    "build_excerpt",
]
