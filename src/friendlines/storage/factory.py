"""Factories for creating interview storage backends."""

from typing import Any

from .base import SessionStore, UserDirectory


def create_session_store(backend: str = "memory", **kwargs: Any) -> SessionStore:
    """Create a session store.

    Args:
        backend: Backend type ("memory" or "sqlite")
        **kwargs: Backend-specific configuration
            For sqlite:
                - path: str | Path (default: './friendlines.db')

    Returns:
        SessionStore instance (call ``connect()`` before use)

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemorySessionStore
        return InMemorySessionStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteSessionStore
        return SQLiteSessionStore(**kwargs)

    raise ValueError(
        f"Unsupported session store: {backend}. "
        f"Supported backends: memory, sqlite"
    )


def create_user_directory(backend: str = "memory", **kwargs: Any) -> UserDirectory:
    """Create a user directory.

    Args:
        backend: Backend type ("memory" or "sqlite")
        **kwargs: Backend-specific configuration
            For memory:
                - users: dict[str, str] mapping user id to display name
            For sqlite:
                - path: str | Path (default: './friendlines.db')

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryUserDirectory
        return InMemoryUserDirectory(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteUserDirectory
        return SQLiteUserDirectory(**kwargs)

    raise ValueError(
        f"Unsupported user directory: {backend}. "
        f"Supported backends: memory, sqlite"
    )
