"""Wiring of stores, provider and service from settings.

Centralizes creation of the runtime collaborators so the HTTP app and the
CLI build them the same way.
"""

from dataclasses import dataclass

from .config import Settings
from .interview.clock import Clock
from .interview.service import InterviewService
from .llm import InterviewProvider, create_interview_provider
from .storage import SessionStore, UserDirectory, create_session_store, create_user_directory


@dataclass
class Components:
    store: SessionStore
    users: UserDirectory
    provider: InterviewProvider
    service: InterviewService

    async def open(self) -> None:
        await self.store.connect()
        await self.users.connect()

    async def close(self) -> None:
        await self.store.disconnect()
        await self.users.disconnect()
        await self.provider.close()


def get_provider(settings: Settings) -> InterviewProvider:
    return create_interview_provider(
        settings.ai_provider,
        api_key=settings.openai_api_key,
        interview_model=settings.ai_interview_model,
        generation_model=settings.ai_generation_model,
        base_url=settings.openai_base_url,
        timeout=settings.provider_timeout_seconds,
    )


def get_stores(settings: Settings) -> tuple[SessionStore, UserDirectory]:
    if settings.session_store == "sqlite":
        return (
            create_session_store("sqlite", path=settings.sqlite_path),
            create_user_directory("sqlite", path=settings.sqlite_path),
        )
    return create_session_store(settings.session_store), create_user_directory(settings.session_store)


def build_components(
    settings: Settings,
    provider: InterviewProvider | None = None,
    clock: Clock | None = None,
) -> Components:
    """Create unopened components; call ``open()`` before serving.

    Args:
        settings: Process settings
        provider: Provider to use instead of the configured one
        clock: Time source override
    """
    store, users = get_stores(settings)
    provider = provider or get_provider(settings)
    service = InterviewService(store, users, provider, settings=settings, clock=clock)
    return Components(store=store, users=users, provider=provider, service=service)
