"""Interview session state machine.

    active --send_message--> active
    active --isDone / message cap--> generating --> completed
    active --cancel--> cancelled

Every operation reads the whole session record, checks ownership, and
writes the whole record back. The ``generating`` record is always written
before the draft is requested, so a slow or failed generation is visible
in the store.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from ..config import SESSION_TTL_SECONDS, Settings, get_settings
from ..errors import Forbidden, InvalidState, NotFound, RateLimitExceeded, ValidationError
from ..llm.base import InterviewProvider
from ..llm.models import INTERVIEW_TYPES, LANGUAGES, ChatMessage, InterviewContext
from ..logger import get_logger
from ..storage.base import SessionStore, UserDirectory
from .clock import Clock, SystemClock, format_weekday, start_of_day, time_of_day
from .models import InterviewSession, SessionStatus

log = get_logger(__name__)

DEFAULT_USER_NAME = "friend"


class InterviewService:
    """Runs AI Reporter interviews on top of a session store and a provider.

    Holds no per-session state; all state lives in the store, so one
    instance can serve any number of concurrent requests.
    """

    def __init__(
        self,
        store: SessionStore,
        users: UserDirectory,
        provider: InterviewProvider,
        settings: Settings | None = None,
        clock: Clock | None = None,
        weekday_formatter: Callable[[datetime, str], str] = format_weekday,
    ):
        """Initialize the service.

        Args:
            store: Session persistence
            users: Display-name lookup
            provider: Language model provider
            settings: Limits; defaults to the process settings
            clock: Time source; defaults to the system local clock
            weekday_formatter: Maps (local time, language) to a weekday name
        """
        settings = settings or get_settings()
        self._store = store
        self._users = users
        self._provider = provider
        self._clock = clock or SystemClock()
        self._format_weekday = weekday_formatter
        self._max_daily_interviews = settings.max_daily_interviews
        self._max_messages = settings.max_messages_per_session

    @property
    def max_daily_interviews(self) -> int:
        return self._max_daily_interviews

    @property
    def max_messages_per_session(self) -> int:
        return self._max_messages

    async def start_interview(
        self,
        user_id: str,
        interview_type: str | None = None,
        language: str | None = None,
    ) -> InterviewSession:
        """Open a new interview and ask the first question.

        Unknown interview types fall back to ``daily`` and unknown
        languages to ``en``.

        Raises:
            RateLimitExceeded: If the user already started the daily maximum
            ProviderError: If the opening question cannot be generated
        """
        if interview_type not in INTERVIEW_TYPES:
            interview_type = "daily"
        if language not in LANGUAGES:
            language = "en"

        local_now = self._clock.now()
        await self._check_rate_limit(user_id, local_now)

        context = InterviewContext(
            time_of_day=time_of_day(local_now.hour),
            day_of_week=self._format_weekday(local_now, language),
            interview_type=interview_type,
            user_name=await self._display_name(user_id),
            language=language,
        )

        first_turn = await self._provider.continue_interview([], context)

        now = local_now.astimezone(timezone.utc)
        session = InterviewSession(
            user_id=user_id,
            status=SessionStatus.ACTIVE,
            messages=[ChatMessage(role="assistant", content=first_turn.question)],
            context=context,
            covered_dimensions=list(first_turn.covered_dimensions),
            prompt_version=self._provider.prompt_version,
            created_at=now,
            updated_at=now,
            ttl=int(now.timestamp()) + SESSION_TTL_SECONDS,
        )
        await self._store.put(session)

        log.info("Created session %s for user %s", session.id, user_id)
        return session

    async def send_message(self, session_id: str, user_id: str, message: str | None) -> InterviewSession:
        """Answer the current question and get the next one.

        When the session already holds ``max_messages_per_session`` messages
        the turn is skipped and the draft is generated from the existing
        transcript; the new message is not recorded.

        Raises:
            NotFound: If the session does not exist
            Forbidden: If the caller does not own the session
            InvalidState: If the session is not active
            ValidationError: If the message is empty
            ProviderError: If a provider call fails
        """
        session = await self._load_owned(session_id, user_id)

        if session.status != SessionStatus.ACTIVE:
            raise InvalidState(
                f"Interview is {session.status.value}. Cannot send more messages."
            )

        if not message or not message.strip():
            raise ValidationError("message is required")

        # Checked against the stored length, before the new message is added.
        if len(session.messages) >= self._max_messages:
            log.info("Session %s hit message cap, forcing completion", session.id)
            return await self._force_complete(session)

        messages = [*session.messages, ChatMessage(role="user", content=message.strip())]

        turn = await self._provider.continue_interview(messages, session.context)
        messages.append(ChatMessage(role="assistant", content=turn.question))

        updated = session.model_copy(update={
            "messages": messages,
            "covered_dimensions": list(turn.covered_dimensions),
            "updated_at": self._utc_now(),
        })

        if turn.is_done:
            log.info("Session %s complete, generating newsflash", session.id)
            updated.status = SessionStatus.GENERATING
            await self._store.put(updated)
            return await self._complete(updated)

        await self._store.put(updated)
        return updated

    async def get_interview(self, session_id: str, user_id: str) -> InterviewSession:
        """Return the stored session unchanged.

        Raises:
            NotFound: If the session does not exist
            Forbidden: If the caller does not own the session
        """
        return await self._load_owned(session_id, user_id)

    async def cancel_interview(self, session_id: str, user_id: str) -> InterviewSession:
        """Abandon an active interview.

        Raises:
            NotFound: If the session does not exist
            Forbidden: If the caller does not own the session
            InvalidState: If the session is not active
        """
        session = await self._load_owned(session_id, user_id)

        if session.status != SessionStatus.ACTIVE:
            raise InvalidState(f"Interview is {session.status.value}. Cannot cancel.")

        cancelled = session.model_copy(update={
            "status": SessionStatus.CANCELLED,
            "updated_at": self._utc_now(),
        })
        await self._store.put(cancelled)

        log.info("Cancelled session %s", session.id)
        return cancelled

    async def _force_complete(self, session: InterviewSession) -> InterviewSession:
        generating = session.model_copy(update={
            "status": SessionStatus.GENERATING,
            "updated_at": self._utc_now(),
        })
        await self._store.put(generating)
        return await self._complete(generating)

    async def _complete(self, generating: InterviewSession) -> InterviewSession:
        """Generate the draft for a persisted ``generating`` session.

        A provider failure propagates and leaves the stored session in
        ``generating``.
        """
        draft = await self._provider.generate_newsflash(generating.messages, generating.context)

        final = generating.model_copy(update={
            "status": SessionStatus.COMPLETED,
            "draft_newsflash": draft,
            "updated_at": self._utc_now(),
        })
        await self._store.put(final)
        return final

    async def _load_owned(self, session_id: str, user_id: str) -> InterviewSession:
        session = await self._store.get(session_id)
        if session is None:
            raise NotFound("Interview session not found")
        if session.user_id != user_id:
            raise Forbidden("Access denied")
        return session

    async def _check_rate_limit(self, user_id: str, local_now: datetime) -> None:
        today = await self._store.query_by_user(user_id, start_of_day(local_now))
        count = len(today)

        log.info("Rate limit check for %s: %d/%d", user_id, count, self._max_daily_interviews)

        if count >= self._max_daily_interviews:
            raise RateLimitExceeded(self._max_daily_interviews)

    async def _display_name(self, user_id: str) -> str:
        try:
            name = await self._users.get_display_name(user_id)
        except Exception:
            log.warning("Display name lookup failed for %s", user_id, exc_info=True)
            return DEFAULT_USER_NAME
        return name or DEFAULT_USER_NAME

    def _utc_now(self) -> datetime:
        return self._clock.now().astimezone(timezone.utc)
