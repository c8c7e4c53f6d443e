"""
Text extraction task.

Converts a document's source into plain text plus element metadata.
File uploads are read from blob storage and routed by MIME type:
plain text and Markdown are parsed locally, PDF and Word documents go
to the remote parser. Documents created with inline text skip the
download and keep their content as-is.

Dependencies: spacerag.boundary.storage, spacerag.boundary.parser
System role: First stage of document ingestion pipeline
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacerag.boundary.db.CRUD import document_crud
from spacerag.boundary.parser import DocumentParser, ParsedDocument, PlainTextParser
from spacerag.boundary.parser.base import ELEMENT_SEPARATOR
from spacerag.boundary.parser.plain_text_parser import TEXT_MIME_TYPES
from spacerag.boundary.parser.unstructured_parser import BINARY_MIME_TYPES
from spacerag.boundary.storage import BlobStorage
from spacerag.core.document_processing.models import ExtractionResult
from spacerag.core.exceptions import MissingInputError, NotFoundError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = TEXT_MIME_TYPES | BINARY_MIME_TYPES


def is_supported_mime_type(mime_type: str | None) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES


def compute_page_spans(parsed: ParsedDocument) -> list[list[int]]:
    """[start, end, page] for every element that knows its page, in text order."""
    spans: list[list[int]] = []
    position = 0
    for element in parsed.elements:
        end = position + len(element.text)
        if element.page_number is not None:
            spans.append([position, end, element.page_number])
        position = end + len(ELEMENT_SEPARATOR)
    return spans


class TextExtractor:
    """bytes + MIME type -> ParsedDocument."""

    def __init__(
        self,
        binary_parser: DocumentParser | None,
        text_parser: DocumentParser | None = None,
    ) -> None:
        self._text_parser = text_parser or PlainTextParser()
        self._binary_parser = binary_parser

    async def extract(self, data: bytes, filename: str, mime_type: str) -> ParsedDocument:
        """
        Extract text from raw bytes.

        Raises:
            UnsupportedFormatError: MIME type outside the allow-list
            MissingInputError: Binary format with no remote parser configured
            ParserUnavailableError: Remote parser unreachable
        """
        if mime_type in TEXT_MIME_TYPES:
            return await self._text_parser.parse(data, filename, mime_type)
        if mime_type in BINARY_MIME_TYPES:
            if self._binary_parser is None:
                raise MissingInputError(f"No parser configured for {mime_type}")
            return await self._binary_parser.parse(data, filename, mime_type)
        raise UnsupportedFormatError(mime_type)


class ExtractionTask:
    """Extract stage: fills document.content and extraction metadata."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage: BlobStorage,
        extractor: TextExtractor,
    ) -> None:
        self._session_factory = session_factory
        self._storage = storage
        self._extractor = extractor

    async def run(self, document_id: uuid.UUID) -> ExtractionResult:
        """
        Extract text for a document and persist it.

        Raises:
            NotFoundError: Document does not exist
            UnsupportedFormatError: File MIME type not allowed
            MissingInputError: No file and no text, or nothing extracted
        """
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                raise NotFoundError("document", document_id)
            file_key = document.file_key
            mime_type = document.file_mime_type
            title = document.title
            inline_text = document.content or ""

        if file_key:
            if not is_supported_mime_type(mime_type):
                raise UnsupportedFormatError(mime_type or "unknown", stage="extract", document_id=document_id)
            data = await self._storage.get(file_key)
            parsed = await self._extractor.extract(data, title, mime_type)
            text = parsed.text
        elif inline_text.strip():
            parsed = PlainTextParser.parse_text(inline_text)
            text = inline_text
        else:
            raise MissingInputError(
                "Document has neither a file nor text content",
                stage="extract",
                document_id=document_id,
            )

        if not text.strip():
            raise MissingInputError("No text could be extracted", stage="extract", document_id=document_id)

        extraction_metadata = {
            "element_count": parsed.element_count,
            "page_count": parsed.page_count,
        }
        if file_key:
            extraction_metadata["page_spans"] = compute_page_spans(parsed)

        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                raise NotFoundError("document", document_id)
            document.content = text
            document.document_metadata = {
                **(document.document_metadata or {}),
                "extraction": extraction_metadata,
            }
            await session.commit()

        logger.info(
            f"{__name__}:run - Extracted text",
            extra={
                "document_id": str(document_id),
                "text_length": len(text),
                "element_count": parsed.element_count,
            },
        )
        return ExtractionResult(
            text_length=len(text),
            element_count=parsed.element_count,
            page_count=parsed.page_count,
        )
