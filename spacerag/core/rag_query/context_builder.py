"""
Conversation context builder.

Turns stored messages and retrieved chunks into the inputs of
RAG_PROMPT: numbered source blocks and a bounded, oldest-first history.

Dependencies: langchain_core.messages
System role: Prompt assembly for answer synthesis
"""

from typing import Any, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from spacerag.boundary.db.models import MessageModel, MessageRole
from spacerag.core.rag_query.retriever import RetrievedChunk


def format_context(chunks: Sequence[RetrievedChunk]) -> str:
    """Source blocks numbered from 1 in retrieval order."""
    return "\n\n".join(
        f"[Source {position} - {chunk.document_title}]:\n{chunk.content}"
        for position, chunk in enumerate(chunks, start=1)
    )


class ConversationContextBuilder:
    """Builds prompt inputs from history and retrieved sources."""

    def __init__(self, history_exchanges: int = 5) -> None:
        """
        Args:
            history_exchanges: Prior question/answer pairs to include
        """
        self.history_exchanges = history_exchanges

    @property
    def history_limit(self) -> int:
        return self.history_exchanges * 2

    def to_chat_history(self, messages: Sequence[MessageModel]) -> list[BaseMessage]:
        """
        Convert stored messages (oldest first) to chat messages.

        Keeps the newest history_limit entries and skips unfinished answers.
        """
        history: list[BaseMessage] = []
        for message in messages:
            if message.role == MessageRole.QUESTION:
                history.append(HumanMessage(content=message.content))
            elif message.content:
                history.append(AIMessage(content=message.content))
        if self.history_limit == 0:
            return []
        return history[-self.history_limit:]

    def build(
        self,
        question: str,
        chunks: Sequence[RetrievedChunk],
        history: Sequence[MessageModel] = (),
    ) -> dict[str, Any]:
        return {
            "question": question,
            "context": format_context(chunks),
            "chat_history": self.to_chat_history(history),
        }
