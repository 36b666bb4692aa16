"""SQLite-backed chat session history store.

Persists per-session message logs to a local SQLite database using
``aiosqlite`` for async I/O.  Each session row carries an ``expires_at``
set when the session is created (24 hours by default).  Expired sessions
read as empty, are reset if written to again, and are pruned on
:meth:`initialize`.

Messages are append-only; the only mutation besides appending is
:meth:`clear`, which removes the whole session.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import aiosqlite
import structlog

from src.interfaces.session_store import ISessionStore
from src.models.session import MessageRole, SessionMessage
from src.utils.errors import SessionStoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/sessions.db")
_SESSION_STARTED = "Session started"

_CREATE_SESSIONS_SQL = """\
CREATE TABLE IF NOT EXISTS sessions (
    session_id  TEXT PRIMARY KEY,
    created_at  TEXT NOT NULL,
    expires_at  TEXT NOT NULL
);
"""

_CREATE_MESSAGES_SQL = """\
CREATE TABLE IF NOT EXISTS messages (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id  TEXT NOT NULL REFERENCES sessions(session_id) ON DELETE CASCADE,
    role        TEXT NOT NULL,
    content     TEXT NOT NULL,
    timestamp   TEXT NOT NULL
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_messages_session ON messages(session_id, id);",
    "CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at);",
]

_SELECT_EXPIRY_SQL = "SELECT expires_at FROM sessions WHERE session_id = ?;"

_UPSERT_SESSION_SQL = """\
INSERT INTO sessions (session_id, created_at, expires_at)
VALUES (?, ?, ?)
ON CONFLICT(session_id)
DO UPDATE SET created_at = excluded.created_at,
              expires_at = excluded.expires_at;
"""

_INSERT_MESSAGE_SQL = """\
INSERT INTO messages (session_id, role, content, timestamp)
VALUES (?, ?, ?, ?);
"""

_SELECT_MESSAGES_SQL = """\
SELECT role, content, timestamp
FROM messages
WHERE session_id = ?
ORDER BY id ASC;
"""

_DELETE_MESSAGES_SQL = "DELETE FROM messages WHERE session_id = ?;"
_DELETE_SESSION_SQL = "DELETE FROM sessions WHERE session_id = ?;"

_PRUNE_MESSAGES_SQL = """\
DELETE FROM messages
WHERE session_id IN (SELECT session_id FROM sessions WHERE expires_at <= ?);
"""
_PRUNE_SESSIONS_SQL = "DELETE FROM sessions WHERE expires_at <= ?;"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class SQLiteSessionStore(ISessionStore):
    """SQLite-backed session history with per-session expiry.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    ttl_hours:
        Lifetime of a session from creation.
    clock:
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        ttl_hours: float = 24,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._db_path = Path(db_path)
        self._ttl = timedelta(hours=ttl_hours)
        self._clock = clock

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create tables and indices, then prune expired sessions."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        now = self._clock().isoformat()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_SESSIONS_SQL)
                await db.execute(_CREATE_MESSAGES_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.execute(_PRUNE_MESSAGES_SQL, (now,))
                cursor = await db.execute(_PRUNE_SESSIONS_SQL, (now,))
                pruned = cursor.rowcount
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                message=f"Session store initialisation failed: {exc}",
                provider_name="sqlite",
            ) from exc

        logger.info("session_store_initialized", path=str(self._db_path), pruned=pruned)

    # ------------------------------------------------------------------
    # ISessionStore implementation
    # ------------------------------------------------------------------

    async def create_session(self) -> str:
        session_id = str(uuid.uuid4())
        now = self._clock()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await self._start_session(db, session_id, now)
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                message=f"Could not create session: {exc}",
                provider_name="sqlite",
            ) from exc

        logger.info("session_created", session_id=session_id, ttl_hours=self._ttl.total_seconds() / 3600)
        return session_id

    async def save(self, session_id: str, role: MessageRole, content: str) -> SessionMessage:
        """Append a message; unknown or expired sessions are (re)started first."""
        message = SessionMessage(role=role, content=content, timestamp=self._clock())
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                if not await self._is_live(db, session_id, message.timestamp):
                    await self._start_session(db, session_id, message.timestamp)
                await db.execute(
                    _INSERT_MESSAGE_SQL,
                    (session_id, message.role.value, message.content, message.timestamp.isoformat()),
                )
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                message=f"Could not save message for session {session_id}: {exc}",
                provider_name="sqlite",
            ) from exc

        logger.debug("session_message_saved", session_id=session_id, role=role.value)
        return message

    async def read_all(self, session_id: str) -> list[SessionMessage]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                if not await self._is_live(db, session_id, self._clock()):
                    return []
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_MESSAGES_SQL, (session_id,))
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                message=f"Could not read session {session_id}: {exc}",
                provider_name="sqlite",
            ) from exc

        return [
            SessionMessage(
                role=MessageRole(row["role"]),
                content=row["content"],
                timestamp=datetime.fromisoformat(row["timestamp"]),
            )
            for row in rows
        ]

    async def clear(self, session_id: str) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_DELETE_MESSAGES_SQL, (session_id,))
                await db.execute(_DELETE_SESSION_SQL, (session_id,))
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                message=f"Could not clear session {session_id}: {exc}",
                provider_name="sqlite",
            ) from exc

        logger.info("session_cleared", session_id=session_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _is_live(self, db: aiosqlite.Connection, session_id: str, now: datetime) -> bool:
        cursor = await db.execute(_SELECT_EXPIRY_SQL, (session_id,))
        row = await cursor.fetchone()
        if row is None:
            return False
        return datetime.fromisoformat(row[0]) > now

    async def _start_session(self, db: aiosqlite.Connection, session_id: str, now: datetime) -> None:
        """(Re)create *session_id* with a fresh expiry and a seed system message."""
        await db.execute(_DELETE_MESSAGES_SQL, (session_id,))
        await db.execute(
            _UPSERT_SESSION_SQL,
            (session_id, now.isoformat(), (now + self._ttl).isoformat()),
        )
        await db.execute(
            _INSERT_MESSAGE_SQL,
            (session_id, MessageRole.SYSTEM.value, _SESSION_STARTED, now.isoformat()),
        )
