"""
Logging utilities for structured `extra` fields.

Context values are flattened to short strings before they reach a
handler: embedding vectors log as their dimension, raw bytes as their
size, and application errors contribute their code, stage and retry
classification.

Dependencies: logging (stdlib), spacerag.core.exceptions
System role: Logging helper functions
"""

import logging
import uuid
from typing import Any

from spacerag.core.exceptions import SpaceRAGException, StageError


def _is_vector(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(
        isinstance(component, float) for component in value
    )


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Convert a context value to a bounded string.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Loggable representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, (bytes, bytearray)):
            return f"bytes({len(value)})"
        if _is_vector(value):
            return f"vector(dim={len(value)})"
        if isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def error_fields(exc: BaseException) -> dict[str, Any]:
    """
    Diagnostic fields for an exception.

    Returns:
        dict: error_type and error_msg, plus error_code for application
        errors and stage/retryable for pipeline stage errors
    """
    fields: dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    }
    if isinstance(exc, SpaceRAGException):
        fields["error_code"] = exc.code
    if isinstance(exc, StageError):
        fields["stage"] = exc.stage
        fields["retryable"] = exc.retryable
    return fields


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with traceback and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context (document_id, task, attempts, ...)
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    safe_context.update(error_fields(exc))
    logger.error(message, exc_info=exc, extra=safe_context)
