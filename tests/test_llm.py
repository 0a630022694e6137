"""Unit tests for the language model provider module."""
import asyncio
import json
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest
from hypothesis import given, settings as hypothesis_settings
from hypothesis import strategies as st

from friendlines.errors import ProviderError, ProviderTimeout
from friendlines.llm import (
    ChatMessage,
    InterviewContext,
    InterviewProvider,
    InterviewTurnResult,
    NewsflashDraft,
    OpenAIInterviewProvider,
    create_interview_provider,
    response_schema,
)
from friendlines.llm.models import DIMENSIONS
from friendlines.llm.providers.openai import render_transcript
from friendlines.prompts import (
    PROMPT_VERSION,
    build_generation_system_prompt,
    build_interview_system_prompt,
    interpolate_prompt,
)


@pytest.fixture
def context():
    return InterviewContext(
        time_of_day="morning",
        day_of_week="Tuesday",
        interview_type="daily",
        user_name="Ava",
        language="he",
    )


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _fake_client(create):
    return SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create)),
        close=AsyncMock(),
    )


def _status_error(status_code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError("upstream failure", response=response, body=None)


class TestProviderInterface:
    """Tests for the abstract InterviewProvider interface."""

    def test_provider_is_abstract(self):
        with pytest.raises(TypeError):
            InterviewProvider()  # type: ignore


class TestResponseSchemas:
    """Tests for schemas derived from the result models."""

    def test_interview_turn_schema(self):
        schema = response_schema(InterviewTurnResult)

        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False
        assert sorted(schema["required"]) == ["coveredDimensions", "isDone", "question"]
        assert set(schema["properties"]) == {"question", "isDone", "coveredDimensions"}
        assert schema["properties"]["isDone"]["type"] == "boolean"
        dimensions = schema["properties"]["coveredDimensions"]
        assert dimensions["type"] == "array"
        assert dimensions["items"]["enum"] == list(DIMENSIONS)

    def test_newsflash_draft_schema(self):
        schema = response_schema(NewsflashDraft)

        assert schema["additionalProperties"] is False
        assert sorted(schema["required"]) == ["category", "headline", "severity", "subHeadline"]
        assert schema["properties"]["category"]["enum"] == [
            "GENERAL", "LIFESTYLE", "ENTERTAINMENT", "SPORTS", "FOOD", "TRAVEL", "OPINION",
        ]
        assert schema["properties"]["severity"]["enum"] == ["STANDARD", "BREAKING", "DEVELOPING"]

    def test_schemas_have_no_generated_titles(self):
        for model in (InterviewTurnResult, NewsflashDraft):
            assert '"title"' not in json.dumps(response_schema(model))

    def test_turn_parses_camel_case_json(self):
        result = InterviewTurnResult.model_validate_json(
            '{"question": "How did it feel?", "isDone": false, "coveredDimensions": ["what"]}'
        )
        assert result.question == "How did it feel?"
        assert result.is_done is False
        assert result.covered_dimensions == ["what"]

    def test_turn_rejects_unknown_dimension(self):
        with pytest.raises(ValueError):
            InterviewTurnResult.model_validate_json(
                '{"question": "?", "isDone": false, "coveredDimensions": ["how"]}'
            )

    def test_draft_rejects_extra_fields(self):
        with pytest.raises(ValueError):
            NewsflashDraft.model_validate({
                "headline": "h", "subHeadline": "s", "category": "FOOD",
                "severity": "STANDARD", "mood": "happy",
            })


class TestPrompts:
    """Tests for prompt templates."""

    def test_prompt_version(self):
        assert PROMPT_VERSION == "v1"

    def test_interview_prompt_is_filled(self):
        prompt = build_interview_system_prompt("Ava", "morning", "Tuesday", "daily", "Hebrew")

        assert "Interview Ava" in prompt
        assert "Current time: morning on Tuesday" in prompt
        assert "Assignment: daily report" in prompt
        assert "entire interview in Hebrew" in prompt
        assert "{{" not in prompt

    def test_generation_prompt_embeds_transcript(self):
        prompt = build_generation_system_prompt("Ava", "Reporter: Hi\nUser: Hello", "English")

        assert "Reporter: Hi\nUser: Hello" in prompt
        assert "entirely in English" in prompt
        assert "Editor Notes" not in prompt
        assert "{{" not in prompt

    def test_generation_prompt_with_feedback(self):
        prompt = build_generation_system_prompt("Ava", "User: Hi", "English", feedback="Make it funnier")

        assert "Editor Notes" in prompt
        assert prompt.rstrip().endswith("Make it funnier")

    def test_interpolate_leaves_unknown_placeholders(self):
        assert interpolate_prompt("Hi {{name}} {{other}}", {"name": "Ava"}) == "Hi Ava {{other}}"


class TestTranscript:
    def test_render_transcript_skips_system(self):
        history = [
            ChatMessage(role="system", content="secret"),
            ChatMessage(role="assistant", content="What happened?"),
            ChatMessage(role="user", content="I ran a 5k"),
        ]
        assert render_transcript(history) == "Reporter: What happened?\nUser: I ran a 5k"

    def test_render_empty_transcript(self):
        assert render_transcript([]) == ""


class TestOpenAIInterviewProvider:
    """Tests for OpenAIInterviewProvider with a stubbed client."""

    def test_models_and_prompt_version(self):
        provider = OpenAIInterviewProvider(api_key="fake-key")

        assert provider.interview_model == "gpt-4o-mini"
        assert provider.generation_model == "gpt-4o"
        assert provider.prompt_version == "v1"

    @pytest.mark.asyncio
    async def test_continue_interview_request(self, context):
        create = AsyncMock(return_value=_completion(
            '{"question": "How did it feel?", "isDone": false, "coveredDimensions": ["what"]}'
        ))
        provider = OpenAIInterviewProvider(api_key="fake-key")
        provider._client = _fake_client(create)
        history = [
            ChatMessage(role="system", content="ignored"),
            ChatMessage(role="assistant", content="What happened today?"),
            ChatMessage(role="user", content="I ran a 5k"),
        ]

        result = await provider.continue_interview(history, context)

        assert result == InterviewTurnResult(
            question="How did it feel?", is_done=False, covered_dimensions=["what"]
        )
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        messages = kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "Interview Ava" in messages[0]["content"]
        assert "Hebrew" in messages[0]["content"]
        assert messages[1:] == [
            {"role": "assistant", "content": "What happened today?"},
            {"role": "user", "content": "I ran a 5k"},
        ]
        response_format = kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["name"] == "interview_turn"
        assert response_format["json_schema"]["strict"] is True
        assert response_format["json_schema"]["schema"] == response_schema(InterviewTurnResult)

    @pytest.mark.asyncio
    async def test_generate_newsflash_request(self, context):
        create = AsyncMock(return_value=_completion(json.dumps({
            "headline": "Ava Conquers First 5K",
            "subHeadline": "A Tuesday morning run ends in triumph.",
            "category": "SPORTS",
            "severity": "BREAKING",
        })))
        provider = OpenAIInterviewProvider(api_key="fake-key", generation_model="gpt-4o-2024")
        provider._client = _fake_client(create)
        history = [
            ChatMessage(role="assistant", content="What happened today?"),
            ChatMessage(role="user", content="I ran a 5k"),
        ]

        draft = await provider.generate_newsflash(history, context)

        assert draft.headline == "Ava Conquers First 5K"
        assert draft.sub_headline == "A Tuesday morning run ends in triumph."
        assert draft.severity == "BREAKING"
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-2024"
        system, user = kwargs["messages"]
        assert "Reporter: What happened today?\nUser: I ran a 5k" in system["content"]
        assert user == {"role": "user", "content": "Generate the newsflash now."}
        assert kwargs["response_format"]["json_schema"]["name"] == "newsflash_draft"

    @pytest.mark.asyncio
    async def test_generate_includes_regeneration_feedback(self, context):
        create = AsyncMock(return_value=_completion(json.dumps({
            "headline": "h", "subHeadline": "s", "category": "GENERAL", "severity": "STANDARD",
        })))
        provider = OpenAIInterviewProvider(api_key="fake-key")
        provider._client = _fake_client(create)
        context = context.model_copy(update={"regeneration_feedback": "Shorter please"})

        await provider.generate_newsflash([], context)

        system = create.await_args.kwargs["messages"][0]["content"]
        assert "Shorter please" in system

    @pytest.mark.asyncio
    async def test_upstream_error_status(self, context):
        provider = OpenAIInterviewProvider(api_key="fake-key")
        provider._client = _fake_client(AsyncMock(side_effect=_status_error(500)))

        with pytest.raises(ProviderError) as exc_info:
            await provider.continue_interview([], context)

        assert exc_info.value.upstream_status == 500
        assert "500" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("completion", [
        _completion(None),
        _completion(""),
        SimpleNamespace(choices=[]),
    ])
    async def test_missing_content(self, context, completion):
        provider = OpenAIInterviewProvider(api_key="fake-key")
        provider._client = _fake_client(AsyncMock(return_value=completion))

        with pytest.raises(ProviderError, match="No content"):
            await provider.continue_interview([], context)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["not json", '{"question": "?"}', "[]"])
    async def test_unparseable_content(self, context, content):
        provider = OpenAIInterviewProvider(api_key="fake-key")
        provider._client = _fake_client(AsyncMock(return_value=_completion(content)))

        with pytest.raises(ProviderError) as exc_info:
            await provider.continue_interview([], context)
        assert not isinstance(exc_info.value, ProviderTimeout)

    @pytest.mark.asyncio
    async def test_slow_call_times_out(self, context):
        async def stall(**kwargs):
            await asyncio.sleep(5)

        provider = OpenAIInterviewProvider(api_key="fake-key", timeout=0.01)
        provider._client = _fake_client(stall)

        with pytest.raises(ProviderTimeout) as exc_info:
            await provider.generate_newsflash([], context)
        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_close_closes_client(self):
        provider = OpenAIInterviewProvider(api_key="fake-key")
        client = _fake_client(AsyncMock())
        provider._client = client

        async with provider:
            pass

        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_continue_interview_real_api(self, api_keys, context):
        """Integration test: first interview question from the live API."""
        if not api_keys["openai"]:
            pytest.skip("OPENAI_API_KEY not set")

        provider = OpenAIInterviewProvider(api_key=api_keys["openai"])
        try:
            result = await provider.continue_interview([], context)
            assert result.question
            assert set(result.covered_dimensions) <= set(DIMENSIONS)
        finally:
            await provider.close()


class TestProviderFactory:
    """Tests for the provider factory."""

    def test_create_openai_provider(self):
        provider = create_interview_provider(
            "openai", api_key="test-key", interview_model="gpt-4o-mini", timeout=5
        )

        assert isinstance(provider, OpenAIInterviewProvider)
        assert provider.interview_model == "gpt-4o-mini"

    def test_unknown_provider_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="friendlines"):
            provider = create_interview_provider("llama", api_key="test-key")

        assert isinstance(provider, OpenAIInterviewProvider)
        assert "Unknown provider: llama" in caplog.text

    def test_create_provider_missing_api_key(self):
        with pytest.raises(TypeError, match="requires 'api_key'"):
            create_interview_provider("openai")

    @hypothesis_settings(deadline=None)
    @given(st.text())
    def test_factory_never_fails_on_provider_name(self, provider_name: str):
        """Property test: any provider name yields the default provider."""
        provider = create_interview_provider(provider_name, api_key="fake")
        assert isinstance(provider, OpenAIInterviewProvider)
