import asyncio
from typing import Any

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ...errors import ProviderError, ProviderTimeout
from ...logger import get_logger
from ...prompts import (
    PROMPT_VERSION,
    build_generation_system_prompt,
    build_interview_system_prompt,
)
from ..base import InterviewProvider
from ..models import (
    INTERVIEW_TURN_SCHEMA_NAME,
    LANGUAGE_NAMES,
    NEWSFLASH_DRAFT_SCHEMA_NAME,
    ChatMessage,
    InterviewContext,
    InterviewTurnResult,
    NewsflashDraft,
    response_schema,
)

log = get_logger(__name__)

GENERATE_INSTRUCTION = "Generate the newsflash now."


def render_transcript(history: list[ChatMessage]) -> str:
    """Render non-system turns as ``Reporter: ...`` / ``User: ...`` lines."""
    return "\n".join(
        f"{'Reporter' if msg.role == 'assistant' else 'User'}: {msg.content}"
        for msg in history
        if msg.role != "system"
    )


class OpenAIInterviewProvider(InterviewProvider):
    """OpenAI provider using Chat Completions with Structured Outputs.

    Hidden design decisions:
    - OpenAI API client initialization
    - Prompt rendering and message format conversion
    - Strict JSON schema response format
    - Translating SDK exceptions into ProviderError / ProviderTimeout
    """

    def __init__(
        self,
        api_key: str,
        interview_model: str = "gpt-4o-mini",
        generation_model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: float = 30.0,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            interview_model: Model for interview turns
            generation_model: Model for newsflash generation
            base_url: Optional custom API base URL
            timeout: Seconds allowed for each call before ProviderTimeout
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        if not api_key:
            log.warning("OPENAI_API_KEY not set")
        self._interview_model = interview_model
        self._generation_model = generation_model
        self._timeout = timeout
        # Failed calls are surfaced to the caller, never retried here.
        client_kwargs.setdefault("max_retries", 0)
        self._client = AsyncOpenAI(
            api_key=api_key or "missing",
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )

    @property
    def interview_model(self) -> str:
        return self._interview_model

    @property
    def generation_model(self) -> str:
        return self._generation_model

    @property
    def prompt_version(self) -> str:
        return PROMPT_VERSION

    async def continue_interview(
        self,
        history: list[ChatMessage],
        context: InterviewContext,
    ) -> InterviewTurnResult:
        language_name = LANGUAGE_NAMES.get(context.language, "English")
        system_prompt = build_interview_system_prompt(
            context.user_name,
            context.time_of_day,
            context.day_of_week,
            context.interview_type,
            language_name,
        )

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(
            {"role": msg.role, "content": msg.content}
            for msg in history
            if msg.role != "system"
        )

        return await self._structured_completion(
            self._interview_model,
            messages,
            INTERVIEW_TURN_SCHEMA_NAME,
            InterviewTurnResult,
        )

    async def generate_newsflash(
        self,
        history: list[ChatMessage],
        context: InterviewContext,
    ) -> NewsflashDraft:
        language_name = LANGUAGE_NAMES.get(context.language, "English")
        system_prompt = build_generation_system_prompt(
            context.user_name,
            render_transcript(history),
            language_name,
            feedback=context.regeneration_feedback,
        )

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": GENERATE_INSTRUCTION},
        ]

        return await self._structured_completion(
            self._generation_model,
            messages,
            NEWSFLASH_DRAFT_SCHEMA_NAME,
            NewsflashDraft,
        )

    async def _structured_completion(
        self,
        model: str,
        messages: list[dict[str, str]],
        schema_name: str,
        result_type: type[BaseModel],
    ) -> Any:
        """Run one schema-constrained completion and parse the result.

        Args:
            model: Model name
            messages: OpenAI-format message dicts
            schema_name: Name sent with the json_schema response format
            result_type: Model the schema is derived from and parsed into

        Returns:
            Instance of ``result_type``

        Raises:
            ProviderTimeout: If the call exceeds the configured timeout
            ProviderError: On upstream failure or unparseable content
        """
        log.info("Calling %s with schema: %s", model, schema_name)

        request_params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "strict": True,
                    "schema": response_schema(result_type),
                },
            },
        }

        try:
            completion = await asyncio.wait_for(
                self._client.chat.completions.create(**request_params),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            log.error("%s timed out after %ss (schema: %s)", model, self._timeout, schema_name)
            raise ProviderTimeout(f"AI provider timed out after {self._timeout:g}s") from e
        except openai.APIStatusError as e:
            log.error("OpenAI API error: %s - %s", e.status_code, e.message)
            raise ProviderError(
                f"OpenAI API error: {e.status_code}", upstream_status=e.status_code
            ) from e
        except openai.APIConnectionError as e:
            log.error("OpenAI connection error: %s", e)
            raise ProviderError("Could not reach the AI provider") from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            raise ProviderError("No content in OpenAI response")

        log.debug("Response: %s...", content[:200])

        try:
            return result_type.model_validate_json(content)
        except PydanticValidationError as e:
            log.error("Unparseable %s response: %s", schema_name, e)
            raise ProviderError(f"Malformed {schema_name} response from AI provider") from e

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
