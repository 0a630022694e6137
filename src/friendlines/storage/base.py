"""Abstract base classes for interview persistence.

The abstractions hide:
- Storage format (documents, SQL rows)
- Persistence mechanism (in-memory, SQLite)
- Connection management

Session records are always written as whole documents. There is no
version token, so concurrent writers of the same session id follow
last-writer-wins.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ..interview.models import InterviewSession


class SessionStore(ABC):
    """Key-value store for interview sessions keyed by session id."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the backend gracefully."""

    @abstractmethod
    async def put(self, session: InterviewSession) -> None:
        """Insert or fully overwrite a session record."""

    @abstractmethod
    async def get(self, session_id: str) -> InterviewSession | None:
        """Fetch a session by id, or None if it does not exist."""

    @abstractmethod
    async def query_by_user(
        self,
        user_id: str,
        created_since: datetime
    ) -> list[InterviewSession]:
        """Sessions owned by ``user_id`` with createdAt >= ``created_since``."""

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Physically delete sessions whose ttl is in the past.

        Returns:
            Number of sessions removed
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""


class UserDirectory(ABC):
    """Read access to user display names."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the backend gracefully."""

    @abstractmethod
    async def get_display_name(self, user_id: str) -> str | None:
        """Return the user's display name, or None if unknown."""

    @abstractmethod
    async def put_user(self, user_id: str, name: str) -> None:
        """Create or rename a user (used to seed local directories)."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
