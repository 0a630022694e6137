"""
Friendlines AI Reporter: turns short interviews into draft newsflashes.

An interview session asks the user a handful of questions through a
structured-output language model, then writes a headline-style draft
from the transcript.
"""

__version__ = "0.1.0"

from .errors import (
    Forbidden,
    FriendlinesError,
    InvalidState,
    NotFound,
    ProviderError,
    ProviderTimeout,
    RateLimitExceeded,
    ValidationError,
)
from .interview import InterviewSession, SessionStatus
from .interview.service import InterviewService
from .llm import InterviewProvider, create_interview_provider
from .storage import create_session_store, create_user_directory

__all__ = [
    "Forbidden",
    "FriendlinesError",
    "InterviewProvider",
    "InterviewService",
    "InterviewSession",
    "InvalidState",
    "NotFound",
    "ProviderError",
    "ProviderTimeout",
    "RateLimitExceeded",
    "SessionStatus",
    "ValidationError",
    "create_interview_provider",
    "create_session_store",
    "create_user_directory",
]
