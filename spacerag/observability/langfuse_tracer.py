"""
Langfuse tracing integration.

Builds langchain callback handlers that report model invocations to Langfuse.

Dependencies: langfuse, spacerag.configs
System role: LLM call tracing for answer synthesis
"""

import logging

from langchain_core.callbacks import BaseCallbackHandler

from spacerag.configs.observability import ObservabilitySettings

logger = logging.getLogger(__name__)


class LangfuseTracer:
    """Owns the Langfuse client and hands out callback handlers."""

    def __init__(self, settings: ObservabilitySettings) -> None:
        self._enabled = settings.tracing_active
        self._client = None
        if self._enabled:
            from langfuse import Langfuse

            self._client = Langfuse(
                public_key=settings.public_key,
                secret_key=settings.secret_key,
                host=settings.host,
            )
            logger.info(f"{__name__}:__init__ - Langfuse tracing enabled (host={settings.host})")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def callbacks(self) -> list[BaseCallbackHandler]:
        """Callback handlers for one model invocation (empty when disabled)."""
        if not self._enabled:
            return []
        from langfuse.langchain import CallbackHandler

        return [CallbackHandler()]

    def flush(self) -> None:
        if self._client is not None:
            self._client.flush()
