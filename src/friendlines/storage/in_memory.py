"""In-memory interview storage.

Simple dict-based storage. Data is lost when the process exits.
"""

from datetime import datetime
from typing import Any

from ..interview.models import InterviewSession
from .base import SessionStore, UserDirectory


class InMemorySessionStore(SessionStore):
    """In-memory session store (process-only).

    Records are kept as serialized documents so every ``get`` returns a
    fresh copy, like a remote document store would.
    Suitable for single-process use or testing.
    """

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def put(self, session: InterviewSession) -> None:
        self._records[session.id] = session.to_record()

    async def get(self, session_id: str) -> InterviewSession | None:
        record = self._records.get(session_id)
        if record is None:
            return None
        return InterviewSession.from_record(record)

    async def query_by_user(
        self,
        user_id: str,
        created_since: datetime
    ) -> list[InterviewSession]:
        sessions = [
            InterviewSession.from_record(record)
            for record in self._records.values()
            if record["userId"] == user_id
        ]
        return [s for s in sessions if s.created_at >= created_since]

    async def purge_expired(self, now: datetime) -> int:
        cutoff = int(now.timestamp())
        expired = [sid for sid, record in self._records.items() if record["ttl"] <= cutoff]
        for sid in expired:
            del self._records[sid]
        return len(expired)

    @property
    def backend_type(self) -> str:
        return "memory"


class InMemoryUserDirectory(UserDirectory):
    """Dict-backed user directory."""

    def __init__(self, users: dict[str, str] | None = None):
        self._users: dict[str, str] = dict(users or {})

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def get_display_name(self, user_id: str) -> str | None:
        return self._users.get(user_id)

    async def put_user(self, user_id: str, name: str) -> None:
        self._users[user_id] = name

    @property
    def backend_type(self) -> str:
        return "memory"
