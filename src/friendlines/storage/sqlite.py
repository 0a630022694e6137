"""SQLite interview storage.

Provides persistent storage using a SQLite database file.
Uses aiosqlite for async access. Each session is one JSON document;
owner, creation time and ttl are duplicated into columns for the
rate-limit query and expiry purge.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ..interview.models import InterviewSession
from .base import SessionStore, UserDirectory


def _utc_key(moment: datetime) -> str:
    """Fixed-width UTC timestamp so that string order matches time order."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")


class SQLiteSessionStore(SessionStore):
    """SQLite-backed session store."""

    def __init__(self, path: str | Path = "./friendlines.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._create_schema()

    async def _create_schema(self) -> None:
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS interview_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                ttl INTEGER NOT NULL,
                document TEXT NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_interview_sessions_user_created
            ON interview_sessions(user_id, created_at)
        """)

        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def put(self, session: InterviewSession) -> None:
        await self._connection.execute("""
            INSERT INTO interview_sessions (id, user_id, created_at, ttl, document)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                user_id = excluded.user_id,
                created_at = excluded.created_at,
                ttl = excluded.ttl,
                document = excluded.document
        """, (
            session.id,
            session.user_id,
            _utc_key(session.created_at),
            session.ttl,
            json.dumps(session.to_record(), ensure_ascii=False),
        ))
        await self._connection.commit()

    async def get(self, session_id: str) -> InterviewSession | None:
        async with self._connection.execute(
            "SELECT document FROM interview_sessions WHERE id = ?",
            (session_id,)
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None
        return InterviewSession.from_record(json.loads(row[0]))

    async def query_by_user(
        self,
        user_id: str,
        created_since: datetime
    ) -> list[InterviewSession]:
        async with self._connection.execute(
            """
            SELECT document FROM interview_sessions
            WHERE user_id = ? AND created_at >= ?
            ORDER BY created_at ASC
            """,
            (user_id, _utc_key(created_since))
        ) as cursor:
            rows = await cursor.fetchall()

        return [InterviewSession.from_record(json.loads(row[0])) for row in rows]

    async def purge_expired(self, now: datetime) -> int:
        cursor = await self._connection.execute(
            "DELETE FROM interview_sessions WHERE ttl <= ?",
            (int(now.timestamp()),)
        )
        await self._connection.commit()
        return cursor.rowcount

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path


class SQLiteUserDirectory(UserDirectory):
    """SQLite-backed user directory."""

    def __init__(self, path: str | Path = "./friendlines.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def get_display_name(self, user_id: str) -> str | None:
        async with self._connection.execute(
            "SELECT name FROM users WHERE id = ?",
            (user_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def put_user(self, user_id: str, name: str) -> None:
        await self._connection.execute("""
            INSERT INTO users (id, name) VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET name = excluded.name
        """, (user_id, name))
        await self._connection.commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"
