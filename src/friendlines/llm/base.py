from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, InterviewContext, InterviewTurnResult, NewsflashDraft


class InterviewProvider(ABC):
    """Abstract base class for AI Reporter language model providers.

    This module hides the design decision of which LLM vendor runs the
    interview. Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Prompt assembly and request format conversion
    - Structured output parsing
    - Mapping upstream failures to ProviderError

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            turn = await provider.continue_interview([], context)
    """

    @abstractmethod
    async def continue_interview(
        self,
        history: list[ChatMessage],
        context: InterviewContext,
    ) -> InterviewTurnResult:
        """Produce the next interview question.

        Args:
            history: Transcript so far (system messages are ignored)
            context: Session context used to build the system prompt

        Returns:
            The next question, whether the interview is done, and the
            dimensions covered so far

        Raises:
            ProviderError: If the upstream call fails or returns bad output
        """

    @abstractmethod
    async def generate_newsflash(
        self,
        history: list[ChatMessage],
        context: InterviewContext,
    ) -> NewsflashDraft:
        """Turn an interview transcript into a draft newsflash.

        Raises:
            ProviderError: If the upstream call fails or returns bad output
        """

    @property
    @abstractmethod
    def prompt_version(self) -> str:
        """Tag of the prompt template set this provider uses."""

    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "InterviewProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
