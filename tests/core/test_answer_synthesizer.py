"""
Tests for AnswerSynthesizer.
"""

import asyncio

import pytest
from langchain_core.messages import SystemMessage

from spacerag.core.rag_query import AnswerSynthesizer

from tests.fakes import FakeChatModel


class SlowChatModel(FakeChatModel):
    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs):
        await asyncio.sleep(1)
        return self._generate(messages, stop=stop, **kwargs)


INPUTS = {"question": "What is Python?", "context": "[Source 1 - Notes]:\nPython is a language.", "chat_history": []}


class TestAnswerSynthesizer:
    async def test_returns_model_text_and_name(self) -> None:
        # Arrange
        chat_model = FakeChatModel(responses=["Python is a language [1]."])
        synthesizer = AnswerSynthesizer(chat_model, model_name="fake-chat")

        # Act
        answer = await synthesizer.synthesize(INPUTS, metadata={"conversation_id": "c-1"})

        # Assert
        assert answer.text == "Python is a language [1]."
        assert answer.model == "fake-chat"
        [sent] = chat_model.calls
        assert isinstance(sent[0], SystemMessage)
        assert sent[-1].content == "What is Python?"

    async def test_provider_error_propagates(self) -> None:
        synthesizer = AnswerSynthesizer(FakeChatModel(error_message="provider down"), model_name="fake-chat")

        with pytest.raises(RuntimeError, match="provider down"):
            await synthesizer.synthesize(INPUTS)

    async def test_timeout_raises(self) -> None:
        synthesizer = AnswerSynthesizer(SlowChatModel(), model_name="fake-chat", timeout_seconds=0.01)

        with pytest.raises(asyncio.TimeoutError):
            await synthesizer.synthesize(INPUTS)
