from .base import InterviewProvider
from .factory import create_interview_provider
from .models import (
    ChatMessage,
    InterviewContext,
    InterviewDimension,
    InterviewTurnResult,
    NewsflashDraft,
    response_schema,
)
from .providers import OpenAIInterviewProvider

__all__ = [
    "InterviewProvider",
    "create_interview_provider",
    "ChatMessage",
    "InterviewContext",
    "InterviewDimension",
    "InterviewTurnResult",
    "NewsflashDraft",
    "response_schema",
    "OpenAIInterviewProvider",
]
