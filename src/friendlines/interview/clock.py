"""Wall-clock and locale helpers for building interview context."""

from abc import ABC, abstractmethod
from datetime import datetime

from ..llm.models import TimeOfDay

LOCALE_MAP: dict[str, str] = {
    "en": "en-US",
    "he": "he-IL",
    "es": "es-ES",
}

# Indexed by datetime.weekday(), Monday first.
WEEKDAY_NAMES: dict[str, tuple[str, ...]] = {
    "en-US": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "he-IL": (
        "יום שני", "יום שלישי", "יום רביעי", "יום חמישי", "יום שישי", "יום שבת", "יום ראשון",
    ),
    "es-ES": ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
}


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware local datetime."""


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now().astimezone()


def time_of_day(hour: int) -> TimeOfDay:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "midday"
    return "evening"


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of the calendar day containing ``moment``."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def format_weekday(moment: datetime, language: str) -> str:
    """Long weekday name in the locale of ``language`` (English if unknown)."""
    locale = LOCALE_MAP.get(language, LOCALE_MAP["en"])
    return WEEKDAY_NAMES[locale][moment.weekday()]
