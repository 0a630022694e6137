"""Persistence for interview sessions and user display names."""

from .base import SessionStore, UserDirectory
from .factory import create_session_store, create_user_directory
from .in_memory import InMemorySessionStore, InMemoryUserDirectory
from .sqlite import SQLiteSessionStore, SQLiteUserDirectory

__all__ = [
    "SessionStore",
    "UserDirectory",
    "create_session_store",
    "create_user_directory",
    "InMemorySessionStore",
    "InMemoryUserDirectory",
    "SQLiteSessionStore",
    "SQLiteUserDirectory",
]
