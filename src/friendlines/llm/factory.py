from typing import Any

from ..logger import get_logger
from .base import InterviewProvider
from .providers import OpenAIInterviewProvider

log = get_logger(__name__)

DEFAULT_PROVIDER = "openai"


def create_interview_provider(provider: str = DEFAULT_PROVIDER, **config: Any) -> InterviewProvider:
    """Create an interview provider instance.

    This factory function hides the instantiation logic for different providers.
    An unknown provider name does not fail: a warning is logged and the
    default provider is built instead, so a misconfigured deployment still
    serves requests.

    Args:
        provider: Provider type ('openai')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - interview_model: str (default: 'gpt-4o-mini')
                - generation_model: str (default: 'gpt-4o')
                - base_url: str | None
                - timeout: float (default: 30.0)

    Returns:
        Initialized provider instance

    Raises:
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_interview_provider(
        ...     "openai",
        ...     api_key="sk-...",
        ...     interview_model="gpt-4o-mini"
        ... )
    """
    provider_lower = (provider or DEFAULT_PROVIDER).lower()

    if provider_lower != DEFAULT_PROVIDER:
        log.warning("Unknown provider: %s, falling back to %s", provider, DEFAULT_PROVIDER)
        provider_lower = DEFAULT_PROVIDER

    if "api_key" not in config:
        raise TypeError("OpenAI provider requires 'api_key' in config")
    instance = OpenAIInterviewProvider(**config)

    log.info("Initialized provider: %s", provider_lower)
    return instance
