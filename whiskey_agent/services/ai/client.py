"""AI judge interface and provider abstraction."""

import json
import re
from abc import ABC, abstractmethod
from enum import Enum

from pydantic import ValidationError

from whiskey_agent.core.errors import JudgeUnavailable
from whiskey_agent.core.schema import JudgeVerdict

# First JSON object in the response, tolerating surrounding prose
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIProvider(str, Enum):
    """Supported AI providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


def parse_verdict(raw_response: str) -> JudgeVerdict:
    """
    Parse a judge response into a verdict.

    Markdown code fences and prose around the JSON object are ignored.

    Args:
        raw_response: The raw text returned by the model.

    Returns:
        The validated JudgeVerdict.

    Raises:
        JudgeUnavailable: If no valid verdict object can be extracted.
    """
    raw_response = raw_response or ""
    match = _JSON_OBJECT.search(raw_response)
    if match is None:
        raise JudgeUnavailable(f"No JSON object in judge response: {raw_response[:200]!r}")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise JudgeUnavailable(f"Judge returned invalid JSON: {e}") from e

    try:
        return JudgeVerdict.model_validate(data)
    except ValidationError as e:
        raise JudgeUnavailable(f"Judge returned an invalid verdict: {e}") from e


class AIJudge(ABC):
    """Abstract base class for LLM-backed dedup judges."""

    provider: AIProvider
    model: str

    @abstractmethod
    def judge(self, name_a: str, name_b: str) -> JudgeVerdict:
        """
        Ask the model whether two names denote the same whiskey.

        Args:
            name_a: Whiskey name as seen in the source.
            name_b: Catalog display name of the candidate.

        Returns:
            The model's verdict.

        Raises:
            JudgeUnavailable: On transport errors or unusable responses.
        """
        pass


def get_judge(
    provider: AIProvider | str,
    api_key: str,
    model: str | None = None,
    timeout: float = 20.0,
) -> AIJudge:
    """
    Factory function to get a judge for the specified provider.

    Args:
        provider: The AI provider to use.
        api_key: The API key for the provider.
        model: Optional model name override.
        timeout: Per-request timeout in seconds.

    Returns:
        An AIJudge instance for the specified provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    if isinstance(provider, str):
        provider = AIProvider(provider.lower())

    if provider == AIProvider.ANTHROPIC:
        from whiskey_agent.services.ai.providers.anthropic import AnthropicJudge

        return AnthropicJudge(api_key=api_key, model=model, timeout=timeout)
    elif provider == AIProvider.OPENAI:
        from whiskey_agent.services.ai.providers.openai import OpenAIJudge

        return OpenAIJudge(api_key=api_key, model=model, timeout=timeout)
    else:
        raise ValueError(f"Unsupported AI provider: {provider}")
