"""
Answer synthesizer.

Runs RAG_PROMPT through the chat model in one non-streaming call and
returns the answer text. Langfuse callbacks are attached when tracing
is enabled.

Dependencies: langchain_core, spacerag.observability.langfuse_tracer
System role: Language model invocation for RAG answers
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser

from spacerag.core.rag_query.rag_prompt import RAG_PROMPT
from spacerag.observability.langfuse_tracer import LangfuseTracer

logger = logging.getLogger(__name__)


@dataclass
class SynthesizedAnswer:
    text: str
    model: str


class AnswerSynthesizer:
    """prompt inputs -> answer text."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        model_name: str,
        timeout_seconds: float = 60.0,
        tracer: LangfuseTracer | None = None,
    ) -> None:
        self._chain = RAG_PROMPT | chat_model | StrOutputParser()
        self.model_name = model_name
        self._timeout = timeout_seconds
        self._tracer = tracer

    async def synthesize(self, inputs: dict[str, Any], metadata: dict[str, Any] | None = None) -> SynthesizedAnswer:
        """
        Invoke the model.

        Raises:
            asyncio.TimeoutError: The call exceeded the configured timeout
            Exception: Whatever the provider raised
        """
        config: dict[str, Any] = {"metadata": metadata or {}, "run_name": "rag-answer"}
        if self._tracer is not None and self._tracer.enabled:
            config["callbacks"] = self._tracer.callbacks()

        text = await asyncio.wait_for(self._chain.ainvoke(inputs, config=config), timeout=self._timeout)
        logger.info(
            f"{__name__}:synthesize - Answer generated",
            extra={"model": self.model_name, "answer_length": len(text)},
        )
        return SynthesizedAnswer(text=text, model=self.model_name)
