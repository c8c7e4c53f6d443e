"""
Document parser interface and result schemas.

Dependencies: abc, pydantic
System role: Capability contract for bytes -> text conversion
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

ELEMENT_SEPARATOR = "\n\n"


class DocumentElement(BaseModel):
    """One structural element (paragraph, title, table) of a parsed document."""

    type: str = "NarrativeText"
    text: str
    page_number: int | None = None


class ParsedDocument(BaseModel):
    """
    Parser output.

    `text` is the elements joined by blank lines; callers rely on that
    layout to map character offsets back to elements.
    """

    text: str
    elements: list[DocumentElement] = Field(default_factory=list)
    page_count: int | None = None

    @property
    def element_count(self) -> int:
        return len(self.elements)

    @classmethod
    def from_elements(cls, elements: list[DocumentElement]) -> "ParsedDocument":
        kept = [element for element in elements if element.text.strip()]
        pages = [element.page_number for element in kept if element.page_number is not None]
        return cls(
            text=ELEMENT_SEPARATOR.join(element.text for element in kept),
            elements=kept,
            page_count=max(pages) if pages else None,
        )


class DocumentParser(ABC):
    """Turns raw bytes of a known MIME type into text plus element metadata."""

    @abstractmethod
    async def parse(self, data: bytes, filename: str, mime_type: str) -> ParsedDocument:
        """
        Parse a document.

        Raises:
            UnsupportedFormatError: The parser cannot handle mime_type
            ParserUnavailableError: The parser could not be reached
        """
