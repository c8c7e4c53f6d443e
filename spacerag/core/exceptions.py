"""
Exception hierarchy for the spacerag application.

Provides layered exception structure for domain-specific errors.
Every exception carries a stable `code`, a user-facing message and
diagnostic `details` that are never shown to end users.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SpaceRAGException(Exception):
    """Base exception for all spacerag application errors."""

    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    @property
    def user_message(self) -> str:
        return self.message


class ValidationError(SpaceRAGException):
    """Raised when input validation fails."""

    code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(SpaceRAGException):
    """Raised when a resource does not exist or is outside the caller's scope."""

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details[f"{resource}_id"] = str(resource_id)
        self.resource = resource
        super().__init__(f"{resource.capitalize()} not found: {resource_id}", details)


class ForbiddenError(SpaceRAGException):
    """Raised when a resource exists but belongs to another user."""

    code = "forbidden"
    status_code = 403

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details[f"{resource}_id"] = str(resource_id)
        super().__init__(f"Access to {resource} {resource_id} is not allowed", details)


class ConflictError(SpaceRAGException):
    """Raised when a write collides with an existing record (duplicate content)."""

    code = "conflict"
    status_code = 409


class PreconditionFailedError(SpaceRAGException):
    """Raised when a request cannot be served in the current state (no relevant sources)."""

    code = "precondition_failed"
    status_code = 412


class RateLimitExceededError(SpaceRAGException):
    """Raised when a user exceeds the request window."""

    code = "rate_limited"
    status_code = 429


class InternalError(SpaceRAGException):
    """
    Raised when model invocation or persistence fails.

    `user_description` is safe to show; `message` is the diagnostic text.
    """

    code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str,
        user_description: str,
        retryable: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.user_description = user_description
        self.retryable = retryable
        super().__init__(message, details)

    @property
    def user_message(self) -> str:
        return self.user_description


class InvalidStatusTransitionError(SpaceRAGException):
    """Raised when a document status change violates the pipeline state machine."""

    code = "invalid_status_transition"
    status_code = 409

    def __init__(self, document_id: Any, current: str, target: str) -> None:
        super().__init__(
            f"Cannot move document from {current} to {target}",
            {"document_id": str(document_id), "current": current, "target": target},
        )


class StageError(SpaceRAGException):
    """Base exception for document pipeline stage failures."""

    code = "stage_error"
    retryable = True

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        document_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if document_id is not None:
            details["document_id"] = str(document_id)
        if stage:
            details["stage"] = stage
        self.stage = stage
        super().__init__(message, details)


class PermanentStageError(StageError):
    """Stage failure that no retry can fix."""

    code = "permanent_stage_error"
    retryable = False


class UnsupportedFormatError(PermanentStageError):
    """Raised when a document's MIME type is outside the allow-list."""

    code = "unsupported_format"

    def __init__(self, mime_type: str, **kwargs: Any) -> None:
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}", **kwargs)


class MissingInputError(PermanentStageError):
    """Raised when a stage's required input is absent (no file, no text, no chunks)."""

    code = "missing_input"


class TransientStageError(StageError):
    """Stage failure expected to clear on retry (network, rate limit, timeout)."""

    code = "transient_stage_error"


class ParserUnavailableError(TransientStageError):
    """Raised when the document parsing service cannot be reached or errors."""

    code = "parser_unavailable"


class EmbeddingProviderError(TransientStageError):
    """Raised when the embedding provider call fails or times out."""

    code = "embedding_provider_error"


class StorageError(TransientStageError):
    """Raised when blob storage reads or writes fail."""

    code = "storage_error"
