"""Pytest configuration and shared fixtures."""
import os
from datetime import datetime, timedelta, timezone

import pytest

from friendlines.config import Settings
from friendlines.errors import ProviderError
from friendlines.interview.clock import Clock
from friendlines.interview.service import InterviewService
from friendlines.llm import (
    ChatMessage,
    InterviewContext,
    InterviewProvider,
    InterviewTurnResult,
    NewsflashDraft,
)
from friendlines.storage import InMemorySessionStore, InMemoryUserDirectory

# Tuesday 2026-10-13, 09:00 at UTC+3
LOCAL_TZ = timezone(timedelta(hours=3))
TUESDAY_9AM = datetime(2026, 10, 13, 9, 0, tzinfo=LOCAL_TZ)


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = TUESDAY_9AM):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


class FakeProvider(InterviewProvider):
    """Scripted provider that records every call.

    ``turns`` are returned in order by continue_interview; once exhausted a
    generic follow-up question is returned.
    """

    def __init__(self):
        self.turns: list[InterviewTurnResult] = []
        self.draft = NewsflashDraft(
            headline="Ava Conquers First 5K",
            sub_headline="A Tuesday morning run ends in triumph.",
            category="SPORTS",
            severity="STANDARD",
        )
        self.continue_calls: list[tuple[list[ChatMessage], InterviewContext]] = []
        self.generate_calls: list[tuple[list[ChatMessage], InterviewContext]] = []
        self.continue_error: ProviderError | None = None
        self.generate_error: ProviderError | None = None

    @property
    def prompt_version(self) -> str:
        return "v-test"

    async def continue_interview(self, history, context):
        self.continue_calls.append((list(history), context))
        if self.continue_error:
            raise self.continue_error
        if self.turns:
            return self.turns.pop(0)
        return InterviewTurnResult(question="Tell me more?", is_done=False, covered_dimensions=[])

    async def generate_newsflash(self, history, context):
        self.generate_calls.append((list(history), context))
        if self.generate_error:
            raise self.generate_error
        return self.draft


class RecordingSessionStore(InMemorySessionStore):
    """In-memory store that remembers the status of every write."""

    def __init__(self):
        super().__init__()
        self.put_statuses: list[str] = []

    async def put(self, session):
        self.put_statuses.append(session.status.value)
        await super().put(session)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"openai": os.getenv("OPENAI_API_KEY")}


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        max_daily_interviews=3,
        max_messages_per_session=8,
        session_store="memory",
        log_format="console",
    )


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def store():
    return RecordingSessionStore()


@pytest.fixture
def users():
    return InMemoryUserDirectory({"u1": "Ava", "u2": "Ben"})


@pytest.fixture
def service(store, users, provider, settings, clock):
    return InterviewService(store, users, provider, settings=settings, clock=clock)
