"""Chat turn handling: answer a question and record it in session history.

A turn is recorded only after an answer exists; if generation fails,
the session history is left untouched.
"""

from __future__ import annotations

import structlog

from src.interfaces.session_store import ISessionStore
from src.models.rag import ChatAnswer
from src.models.session import MessageRole
from src.services.retrieval_service import RetrievalService

logger = structlog.get_logger(logger_name=__name__)


class ChatService:
    def __init__(self, retrieval_service: RetrievalService, session_store: ISessionStore) -> None:
        self._retrieval = retrieval_service
        self._sessions = session_store

    async def ask(self, session_id: str, query: str, k: int | None = None) -> ChatAnswer:
        answer, retrieved = await self._retrieval.answer(query, k)

        await self._sessions.save(session_id, MessageRole.USER, query)
        await self._sessions.save(session_id, MessageRole.BOT, answer)

        logger.info(
            "chat_turn_complete",
            session_id=session_id,
            context_chunks=len(retrieved.hits),
            degraded_reason=retrieved.degraded_reason,
        )
        return ChatAnswer(
            session_id=session_id,
            query=query,
            answer=answer,
            context_chunks=len(retrieved.hits),
        )
