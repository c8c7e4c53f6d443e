"""
Chat service for conversational Q&A with RAG.

Orchestrates the ask flow: conversation resolution, question
persistence, retrieval, bounded history, placeholder answer, model
invocation, and transactional finalization with citations. A failed
model call removes the placeholder so only the question remains.

Dependencies: spacerag.core.rag_query, spacerag.boundary.db
System role: Chat service orchestration layer
"""

import logging
import time
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.application.rate_limit import RateLimiter
from spacerag.application.services.access import require_conversation, require_space
from spacerag.boundary.db.CRUD import citation_crud, conversation_crud, message_crud
from spacerag.boundary.db.models import ConversationModel, MessageModel, MessageRole
from spacerag.configs.chat import ChatSettings
from spacerag.core.exceptions import (
    ForbiddenError,
    InternalError,
    NotFoundError,
    PreconditionFailedError,
)
from spacerag.core.rag_query import (
    NOT_FOUND_ANSWER,
    AnswerSynthesizer,
    ConversationContextBuilder,
    RetrievedChunk,
    VectorRetriever,
)
from spacerag.models.chat import AnswerMetadata, AskResponse, MessageWithCitationsResponse
from spacerag.models.citation import Citation, CitationWithChunk
from spacerag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "I'm having trouble generating a response right now. Please try again."


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class ChatService:
    """
    Chat service for conversational Q&A.

    Coordinates conversation access, retrieval, prompt assembly, model
    invocation and message/citation persistence.
    """

    def __init__(
        self,
        db: AsyncSession,
        retriever: VectorRetriever,
        synthesizer: AnswerSynthesizer,
        settings: ChatSettings,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for database operations
            retriever: Vector retriever for the space
            synthesizer: Language model wrapper
            settings: History window, title and excerpt sizes
            rate_limiter: Optional per-user limiter
        """
        self.db = db
        self.retriever = retriever
        self.synthesizer = synthesizer
        self.settings = settings
        self.context_builder = ConversationContextBuilder(settings.history_exchanges)
        self.rate_limiter = rate_limiter

    async def _resolve_conversation(
        self,
        space_id: UUID,
        user_id: str,
        question: str,
        conversation_id: UUID | None,
    ) -> ConversationModel:
        if conversation_id is not None:
            return await require_conversation(self.db, conversation_id, user_id, space_id=space_id)
        return await conversation_crud.create(
            self.db,
            space_id=space_id,
            user_id=user_id,
            title=question[: self.settings.title_max_chars],
        )

    async def ask(
        self,
        space_id: UUID,
        user_id: str,
        question: str,
        conversation_id: UUID | None = None,
    ) -> AskResponse:
        """
        Answer a question from the space's READY documents.

        Flow:
        1. Resolve the conversation (or create one titled from the question)
        2. Persist the question
        3. Retrieve chunks; none found is a precondition failure
        4. Load bounded history, oldest first
        5. Insert an empty answer placeholder
        6. Invoke the model; on failure delete the placeholder
        7. Finalize answer, citations and conversation recency in one commit

        Returns:
            AskResponse: Answer, conversation id, citations and metadata

        Raises:
            NotFoundError: Space or conversation missing (or conversation in another space)
            ForbiddenError: Space or conversation owned by another user
            PreconditionFailedError: No relevant chunks
            InternalError: Model invocation or persistence failed
            RateLimitExceededError: Rate limiting enabled and exceeded
        """
        start_time = time.perf_counter()
        if self.rate_limiter is not None:
            self.rate_limiter.check(user_id)

        await require_space(self.db, space_id, user_id)
        conversation = await self._resolve_conversation(space_id, user_id, question, conversation_id)
        question_message = await message_crud.create(
            self.db,
            conversation_id=conversation.id,
            role=MessageRole.QUESTION,
            content=question,
        )
        await self.db.commit()

        search_start = time.perf_counter()
        chunks = await self.retriever.retrieve(question, space_id)
        vector_search_time_ms = _elapsed_ms(search_start)
        if not chunks:
            logger.info(
                f"{__name__}:ask - No relevant chunks",
                extra={"conversation_id": str(conversation.id), "space_id": str(space_id)},
            )
            raise PreconditionFailedError(
                NOT_FOUND_ANSWER,
                details={"conversation_id": str(conversation.id)},
            )

        history = await message_crud.get_recent(
            self.db,
            conversation.id,
            limit=self.context_builder.history_limit,
            exclude_ids=[question_message.id],
        )
        prompt_inputs = self.context_builder.build(question, chunks, history)

        placeholder = await message_crud.create(
            self.db,
            conversation_id=conversation.id,
            role=MessageRole.ANSWER,
            content="",
        )
        await self.db.commit()
        # Rollback expires loaded instances; the failure paths only use these ids.
        answer_id = placeholder.id
        resolved_conversation_id = conversation.id

        try:
            answer = await self.synthesizer.synthesize(
                prompt_inputs,
                metadata={"conversation_id": str(conversation.id), "space_id": str(space_id)},
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:ask - Model invocation failed, removing placeholder",
                e,
                conversation_id=str(resolved_conversation_id),
                message_id=str(answer_id),
            )
            await self._discard_placeholder(answer_id)
            raise InternalError(
                f"Model invocation failed: {e}",
                user_description=GENERATION_FAILED_MESSAGE,
                retryable=True,
                details={"conversation_id": str(resolved_conversation_id)},
            ) from e

        metadata = AnswerMetadata(
            model=answer.model,
            processing_time_ms=_elapsed_ms(start_time),
            vector_search_time_ms=vector_search_time_ms,
            chunks_retrieved=len(chunks),
        )
        citations = self._build_citations(chunks)
        try:
            placeholder.content = answer.text
            placeholder.message_metadata = metadata.model_dump()
            await citation_crud.bulk_create(
                self.db,
                placeholder.id,
                [
                    {
                        "chunk_id": citation.chunk_id,
                        "relevance_score": citation.relevance_score,
                        "excerpt": citation.excerpt,
                        "citation_index": citation.index,
                    }
                    for citation in citations
                ],
            )
            await conversation_crud.touch(self.db, conversation.id)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:ask - Persisting answer failed, removing placeholder",
                e,
                conversation_id=str(resolved_conversation_id),
                message_id=str(answer_id),
            )
            await self._discard_placeholder(answer_id)
            raise InternalError(
                f"Failed to persist answer: {e}",
                user_description=GENERATION_FAILED_MESSAGE,
                details={"conversation_id": str(resolved_conversation_id)},
            ) from e

        logger.info(
            f"{__name__}:ask - Answer persisted",
            extra={
                "conversation_id": str(conversation.id),
                "message_id": str(placeholder.id),
                "chunks_retrieved": len(chunks),
                "processing_time_ms": metadata.processing_time_ms,
            },
        )
        return AskResponse(
            answer=answer.text,
            conversation_id=conversation.id,
            message_id=placeholder.id,
            citations=citations,
            metadata=metadata,
        )

    async def _discard_placeholder(self, message_id: UUID) -> None:
        try:
            await message_crud.delete_by_id(self.db, message_id)
            await self.db.commit()
        except Exception as cleanup_error:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:_discard_placeholder - Could not remove placeholder",
                cleanup_error,
                message_id=str(message_id),
            )

    def _build_citations(self, chunks: list[RetrievedChunk]) -> list[Citation]:
        return [
            Citation(
                index=position,
                chunk_id=chunk.chunk_id,
                document_id=chunk.document_id,
                document_title=chunk.document_title,
                relevance_score=chunk.similarity,
                excerpt=chunk.excerpt,
                page_numbers=list(chunk.metadata.get("page_numbers") or []),
            )
            for position, chunk in enumerate(chunks, start=1)
        ]

    async def list_messages(self, conversation_id: UUID, user_id: str) -> list[MessageModel]:
        """
        Messages of a conversation, oldest first.

        Raises:
            NotFoundError / ForbiddenError: Conversation access
        """
        await require_conversation(self.db, conversation_id, user_id)
        return list(await message_crud.get_by_conversation(self.db, conversation_id))

    async def get_message_with_citations(self, message_id: UUID, user_id: str) -> MessageWithCitationsResponse:
        """
        A message with its citations joined to chunk and document.

        Raises:
            NotFoundError: Message does not exist
            ForbiddenError: Message belongs to another user's conversation
        """
        message = await message_crud.get_with_citations(self.db, message_id)
        if message is None:
            raise NotFoundError("message", message_id)
        if message.conversation.user_id != user_id:
            raise ForbiddenError("message", message_id)

        return MessageWithCitationsResponse(
            id=message.id,
            conversation_id=message.conversation_id,
            role=message.role,
            content=message.content,
            metadata=message.message_metadata,
            created_at=message.created_at,
            citations=[
                CitationWithChunk(
                    id=citation.id,
                    index=citation.citation_index,
                    chunk_id=citation.chunk_id,
                    document_id=citation.chunk.document_id,
                    document_title=citation.chunk.document.title,
                    relevance_score=citation.relevance_score,
                    excerpt=citation.excerpt,
                    page_numbers=list((citation.chunk.chunk_metadata or {}).get("page_numbers") or []),
                    chunk_content=citation.chunk.content,
                    chunk_index=citation.chunk.chunk_index,
                )
                for citation in message.citations
            ],
        )
