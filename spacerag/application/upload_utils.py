"""
Upload utilities.

Filename validation, MIME resolution and blob key generation for file
uploads.

Dependencies: None
System role: Upload request validation
"""

import uuid

from spacerag.core.document_processing.tasks import SUPPORTED_MIME_TYPES

EXTENSION_MIME_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "txt": "text/plain",
    "md": "text/markdown",
    "markdown": "text/markdown",
}

GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


class FilenameValidationError(ValueError):
    """Raised when filename validation fails."""

    pass


def validate_filename(filename: str) -> None:
    """
    Validate filename for security.

    Args:
        filename: Original filename from user

    Raises:
        FilenameValidationError: If filename is invalid
    """
    if not filename or len(filename) > 255:
        raise FilenameValidationError("Invalid filename length")

    # Block path traversal attacks
    if ".." in filename or "/" in filename or "\\" in filename:
        raise FilenameValidationError("Invalid filename: path traversal detected")


def resolve_mime_type(filename: str, content_type: str | None) -> str:
    """
    Pick the effective MIME type of an upload.

    A generic content type falls back to the file extension.

    Raises:
        FilenameValidationError: Type is outside the allow-list
    """
    mime_type = (content_type or "").split(";", 1)[0].strip().lower()
    if mime_type in GENERIC_MIME_TYPES and "." in filename:
        mime_type = EXTENSION_MIME_TYPES.get(filename.rsplit(".", 1)[-1].lower(), mime_type)
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise FilenameValidationError(
            f"File type '{mime_type or 'unknown'}' not allowed. Allowed: {', '.join(sorted(SUPPORTED_MIME_TYPES))}"
        )
    return mime_type


def generate_safe_key(space_id: str, filename: str) -> str:
    """
    Generate unique blob key to prevent collisions and security issues.

    Format: spaces/{space_id}/documents/{unique_id}-{sanitized_name}.{ext}

    Args:
        space_id: Space UUID as string
        filename: Original filename from user

    Returns:
        str: Safe storage key
    """
    # Extract file extension
    file_ext = ""
    if "." in filename:
        file_ext = "." + filename.rsplit(".", 1)[-1].lower()

    # Sanitize filename (only alphanumeric, hyphens, underscores)
    base_name = filename.rsplit(".", 1)[0] if "." in filename else filename
    safe_name = "".join(c for c in base_name if c.isalnum() or c in "-_")
    if not safe_name:
        safe_name = "document"

    # Add unique prefix to prevent collisions
    unique_id = str(uuid.uuid4())[:8]

    return f"spaces/{space_id}/documents/{unique_id}-{safe_name}{file_ext}"
