"""
Correlation ids for log records.

HTTP requests bind the caller's X-Correlation-ID (or a fresh uuid4 hex);
pipeline runs bind "doc-<document_id>" so every stage attempt of one run
shares an id. asyncio tasks copy the context when they are created, so a
binding made before create_task follows the work into the task.
"""

import logging
import uuid
from contextvars import ContextVar, Token

NO_CORRELATION_ID = "-"

_correlation_id: ContextVar[str | None] = ContextVar("spacerag_correlation_id", default=None)


def bind_correlation_id(value: str | None = None) -> tuple[str, Token]:
    """
    Bind a correlation id to the current context.

    Args:
        value: Id to bind; blank or missing values get a new uuid4 hex

    Returns:
        tuple: The bound id and the token to pass to reset_correlation_id
    """
    bound = (value or "").strip() or uuid.uuid4().hex
    return bound, _correlation_id.set(bound)


def reset_correlation_id(token: Token) -> None:
    """Restore whatever id was bound before the matching bind call."""
    _correlation_id.reset(token)


def get_correlation_id() -> str:
    return _correlation_id.get() or NO_CORRELATION_ID


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the bound correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        return True
