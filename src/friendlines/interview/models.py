"""Interview session record.

The session is stored and returned as one whole document; its camelCase
JSON form (see :meth:`InterviewSession.to_record`) is the representation
used by the stores and the HTTP layer.
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..llm.models import ChatMessage, InterviewContext, InterviewDimension, NewsflashDraft


class SessionStatus(str, Enum):
    """Lifecycle states. ``completed`` and ``cancelled`` are terminal."""

    ACTIVE = "active"
    GENERATING = "generating"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.CANCELLED)


class InterviewSession(BaseModel):
    """One AI Reporter interview owned by a single user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    status: SessionStatus = SessionStatus.ACTIVE
    messages: list[ChatMessage] = Field(default_factory=list)
    context: InterviewContext
    covered_dimensions: list[InterviewDimension] = Field(default_factory=list)
    draft_newsflash: NewsflashDraft | None = None
    prompt_version: str
    created_at: datetime
    updated_at: datetime
    ttl: int = Field(description="Expiry as epoch seconds")

    def to_record(self) -> dict[str, Any]:
        """Serialize to the stored/wire document (camelCase, JSON types)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "InterviewSession":
        return cls.model_validate(record)
