"""AI judge provider implementations."""

from whiskey_agent.services.ai.providers.anthropic import AnthropicJudge
from whiskey_agent.services.ai.providers.openai import OpenAIJudge

__all__ = ["AnthropicJudge", "OpenAIJudge"]
