"""
Document parser boundary.

Exports: DocumentParser, ParsedDocument, DocumentElement, PlainTextParser, UnstructuredParser
"""

from spacerag.boundary.parser.base import DocumentElement, DocumentParser, ParsedDocument
from spacerag.boundary.parser.plain_text_parser import PlainTextParser
from spacerag.boundary.parser.unstructured_parser import UnstructuredParser

__all__ = [
    "DocumentParser",
    "ParsedDocument",
    "DocumentElement",
    "PlainTextParser",
    "UnstructuredParser",
]
