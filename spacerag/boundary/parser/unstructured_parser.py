"""
Unstructured partition API client.

Posts file bytes to the partition endpoint and converts the returned
elements into a ParsedDocument. Network failures, timeouts and 5xx/429
responses are transient; 4xx rejections of the file are permanent.

Dependencies: httpx
System role: Remote extraction for PDF and Word documents
"""

import logging

import httpx

from spacerag.boundary.parser.base import DocumentElement, DocumentParser, ParsedDocument
from spacerag.configs.parser import ParserSettings
from spacerag.core.exceptions import (
    MissingInputError,
    ParserUnavailableError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

BINARY_MIME_TYPES = frozenset({
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
})


class UnstructuredParser(DocumentParser):
    """Remote parser backed by the Unstructured API."""

    def __init__(self, settings: ParserSettings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client

    async def parse(self, data: bytes, filename: str, mime_type: str) -> ParsedDocument:
        if mime_type not in BINARY_MIME_TYPES:
            raise UnsupportedFormatError(mime_type)
        if not self._settings.api_key:
            raise MissingInputError("UNSTRUCTURED_API_KEY is not configured")

        try:
            response = await self._http.post(
                self._settings.api_url,
                headers={"unstructured-api-key": self._settings.api_key, "accept": "application/json"},
                files={"files": (filename, data, mime_type)},
                data={"strategy": self._settings.strategy, "coordinates": "false"},
                timeout=self._settings.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise ParserUnavailableError(f"Parser timed out after {self._settings.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise ParserUnavailableError(f"Parser request failed: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise ParserUnavailableError(
                f"Parser returned {response.status_code}",
                details={"body": response.text[:500]},
            )
        if response.status_code >= 400:
            raise UnsupportedFormatError(
                mime_type,
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

        payload = response.json()
        raw_elements = payload.get("elements", []) if isinstance(payload, dict) else payload
        elements = [
            DocumentElement(
                type=item.get("type") or "NarrativeText",
                text=item.get("text") or "",
                page_number=(item.get("metadata") or {}).get("page_number"),
            )
            for item in raw_elements
        ]
        parsed = ParsedDocument.from_elements(elements)
        logger.info(
            f"{__name__}:parse - Parsed {filename}",
            extra={"elements": parsed.element_count, "pages": parsed.page_count},
        )
        return parsed
