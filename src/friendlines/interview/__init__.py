"""AI Reporter interview sessions.

The state machine lives in :mod:`friendlines.interview.service`; it is not
re-exported here because the storage layer depends on these models.
"""

from .clock import Clock, SystemClock, format_weekday, start_of_day, time_of_day
from .models import InterviewSession, SessionStatus

__all__ = [
    "Clock",
    "SystemClock",
    "InterviewSession",
    "SessionStatus",
    "format_weekday",
    "start_of_day",
    "time_of_day",
]
