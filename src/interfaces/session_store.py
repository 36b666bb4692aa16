"""Abstract base class for chat session history stores.

A session is an append-only message log keyed by session id, with an
expiry set when the session is created.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.session import MessageRole, SessionMessage


# Concrete implementation: SQLiteSessionStore (src/providers/session/)
class ISessionStore(ABC):
    """Contract for per-session message history persistence."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare storage (create tables, prune expired sessions)."""

    @abstractmethod
    async def create_session(self) -> str:
        """Create a new session, seed it with a system message, and return its id.

        The session expires after the store's configured TTL.
        """

    @abstractmethod
    async def save(self, session_id: str, role: MessageRole, content: str) -> SessionMessage:
        """Append a message to *session_id*'s history and return it.

        Raises
        ------
        src.utils.errors.SessionStoreError
            If the write fails.
        """

    @abstractmethod
    async def read_all(self, session_id: str) -> list[SessionMessage]:
        """Return the full history, oldest first.

        Unknown or expired sessions return an empty list.
        """

    @abstractmethod
    async def clear(self, session_id: str) -> None:
        """Delete the session and all of its messages."""

    async def aclose(self) -> None:
        """Release any held resources.  Default: nothing to release."""
