"""
Local parser for plain text and Markdown.

Dependencies: spacerag.boundary.parser.base
System role: In-process extraction for text formats
"""

import re

from spacerag.boundary.parser.base import DocumentElement, DocumentParser, ParsedDocument
from spacerag.core.exceptions import UnsupportedFormatError

TEXT_MIME_TYPES = frozenset({"text/plain", "text/markdown", "text/x-markdown"})

_BLANK_LINES = re.compile(r"\n\s*\n")


class PlainTextParser(DocumentParser):
    """Decode as UTF-8 and split paragraphs on blank lines."""

    async def parse(self, data: bytes, filename: str, mime_type: str) -> ParsedDocument:
        if mime_type not in TEXT_MIME_TYPES:
            raise UnsupportedFormatError(mime_type)
        text = data.decode("utf-8", errors="replace").replace("\r\n", "\n")
        return self.parse_text(text)

    @staticmethod
    def parse_text(text: str) -> ParsedDocument:
        paragraphs = [p.strip() for p in _BLANK_LINES.split(text)]
        return ParsedDocument.from_elements(
            [DocumentElement(type="NarrativeText", text=p) for p in paragraphs if p]
        )
