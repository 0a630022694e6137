"""Data models exchanged with language model providers.

The structured-output result models double as the source of the JSON
schemas sent to the provider, see :func:`response_schema`.
"""

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Role = Literal["system", "assistant", "user"]
InterviewDimension = Literal["who", "what", "when", "where", "why", "emotion"]
InterviewType = Literal["daily", "weekly", "event"]
SupportedLanguage = Literal["en", "he", "es"]
TimeOfDay = Literal["morning", "midday", "evening"]
NewsflashCategory = Literal[
    "GENERAL", "LIFESTYLE", "ENTERTAINMENT", "SPORTS", "FOOD", "TRAVEL", "OPINION"
]
NewsflashSeverity = Literal["STANDARD", "BREAKING", "DEVELOPING"]

DIMENSIONS: tuple[str, ...] = get_args(InterviewDimension)
INTERVIEW_TYPES: tuple[str, ...] = get_args(InterviewType)
LANGUAGES: tuple[str, ...] = get_args(SupportedLanguage)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "he": "Hebrew",
    "es": "Spanish",
}


class ChatMessage(BaseModel):
    """Represents a chat message in an interview transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class InterviewContext(BaseModel):
    """Per-session facts used to build prompts. Fixed when the session starts."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    time_of_day: TimeOfDay
    day_of_week: str
    interview_type: InterviewType
    user_name: str
    language: SupportedLanguage
    regeneration_feedback: str | None = None


class InterviewTurnResult(BaseModel):
    """Structured reply to one interview turn."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    question: str = Field(description="The next interview question to ask")
    is_done: bool = Field(description="Whether the interview has enough information")
    covered_dimensions: list[InterviewDimension] = Field(
        description="Which dimensions have been covered so far"
    )


class NewsflashDraft(BaseModel):
    """Generated candidate newsflash."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    headline: str = Field(description="The newsflash headline (max 100 chars)")
    sub_headline: str = Field(description="Supporting details (max 200 chars)")
    category: NewsflashCategory
    severity: NewsflashSeverity


def _strip_titles(node: Any) -> Any:
    if isinstance(node, dict):
        cleaned = {}
        for key, value in node.items():
            if key == "title" and isinstance(value, str):
                continue
            if key == "properties" and isinstance(value, dict):
                cleaned[key] = {name: _strip_titles(prop) for name, prop in value.items()}
            else:
                cleaned[key] = _strip_titles(value)
        return cleaned
    if isinstance(node, list):
        return [_strip_titles(item) for item in node]
    return node


def response_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Build the strict JSON schema for a structured-output result model.

    Field names use their camelCase aliases, every field is required and
    ``additionalProperties`` is false because the models forbid extras.

    Args:
        model: A model with no optional fields and ``extra="forbid"``

    Returns:
        JSON schema dict without pydantic's generated titles
    """
    return _strip_titles(model.model_json_schema(by_alias=True))


INTERVIEW_TURN_SCHEMA_NAME = "interview_turn"
NEWSFLASH_DRAFT_SCHEMA_NAME = "newsflash_draft"
