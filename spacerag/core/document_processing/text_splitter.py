"""
Offset-tracked recursive text chunker.

Splits text with RecursiveCharacterTextSplitter (paragraph -> line ->
sentence punctuation -> clause punctuation -> whitespace -> character)
and locates every chunk in the source text so each carries start/end
character offsets. Offsets are searched from just past the previous
chunk's start, which keeps repeated substrings and overlapping chunks
in document order.

Dependencies: langchain_text_splitters
System role: Chunker for the Chunk stage
"""

import bisect
import logging
import math
from typing import Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from spacerag.core.document_processing.models import Chunk

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", "! ", "? ", "; ", ", ", " ", ""]


def estimate_tokens(text: str, chars_per_token: int = 4) -> int:
    """Cheap token estimate: characters / average characters per token, rounded up."""
    return math.ceil(len(text) / chars_per_token)


class PageSpanIndex:
    """Maps character ranges of the source text to page numbers."""

    def __init__(self, spans: Sequence[Sequence[int]]) -> None:
        # spans: [start, end, page] triples sorted by start
        ordered = sorted((int(s), int(e), int(p)) for s, e, p in spans)
        self._starts = [span[0] for span in ordered]
        self._spans = ordered

    def pages_for(self, start: int, end: int) -> list[int]:
        pages: list[int] = []
        position = max(bisect.bisect_right(self._starts, start) - 1, 0)
        for span_start, span_end, page in self._spans[position:]:
            if span_start >= end:
                break
            if span_end > start and page not in pages:
                pages.append(page)
        return pages


class TextChunker:
    """Recursive boundary-aware chunker with character offsets."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: list[str] | None = None,
        chars_per_token: int = 4,
    ) -> None:
        """
        Args:
            chunk_size: Target maximum chunk length in characters
            chunk_overlap: Characters shared by consecutive chunks
            separators: Separators in priority order
            chars_per_token: Divisor for the token estimate

        Raises:
            ValueError: chunk_overlap is not smaller than chunk_size
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._chars_per_token = chars_per_token
        self._splitter = RecursiveCharacterTextSplitter(
            separators=separators or DEFAULT_SEPARATORS,
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            keep_separator="end",
            length_function=len,
            strip_whitespace=True,
        )

    def split(
        self,
        text: str,
        page_spans: Sequence[Sequence[int]] | None = None,
    ) -> list[Chunk]:
        """
        Split text into ordered, offset-tracked chunks.

        Args:
            text: Full source text
            page_spans: Optional [start, end, page] triples for page metadata

        Returns:
            list[Chunk]: Chunks in document order with non-decreasing offsets
        """
        if not text or not text.strip():
            return []

        page_index = PageSpanIndex(page_spans) if page_spans else None
        chunks: list[Chunk] = []
        search_from = 0

        for piece in self._splitter.split_text(text):
            content = piece.strip()
            if not content:
                continue

            start = text.find(content, search_from)
            if start == -1:
                # Splitter output is always a substring; keep ordering if that ever breaks
                logger.warning(
                    f"{__name__}:split - Chunk text not found in source, using previous position",
                    extra={"chunk_index": len(chunks), "search_from": search_from},
                )
                start = search_from
            end = start + len(content)

            metadata = {}
            if page_index is not None:
                pages = page_index.pages_for(start, end)
                if pages:
                    metadata["page_numbers"] = pages

            chunks.append(
                Chunk(
                    content=content,
                    index=len(chunks),
                    start_offset=start,
                    end_offset=end,
                    token_count=estimate_tokens(content, self._chars_per_token),
                    metadata=metadata,
                )
            )
            search_from = start + 1

        return chunks
