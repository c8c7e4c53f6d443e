"""
Observability module.

Structured logging with correlation ids, request middleware and Langfuse
tracing of answer generation.
"""

from spacerag.observability.correlation import bind_correlation_id, get_correlation_id, reset_correlation_id
from spacerag.observability.logger import configure_logging

__all__ = ["bind_correlation_id", "configure_logging", "get_correlation_id", "reset_correlation_id"]
