"""Chat session history stores."""

from src.providers.session.sqlite_session_store import SQLiteSessionStore

__all__ = ["SQLiteSessionStore"]
