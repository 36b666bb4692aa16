"""newsrag domain models — re-exports all public model classes.

    - rag.py      — documents, chunks, indexed points, search hits, outcomes
    - session.py  — chat session history messages
"""

from __future__ import annotations

from src.models.rag import (
    ChatAnswer,
    Chunk,
    ChunkPayload,
    Document,
    IndexedPoint,
    IngestionResult,
    RetrievalContext,
    SearchHit,
)
from src.models.session import MessageRole, SessionMessage

__all__ = [
    "ChatAnswer",
    "Chunk",
    "ChunkPayload",
    "Document",
    "IndexedPoint",
    "IngestionResult",
    "MessageRole",
    "RetrievalContext",
    "SearchHit",
    "SessionMessage",
]
