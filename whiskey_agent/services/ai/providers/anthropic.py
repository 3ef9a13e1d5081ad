"""Anthropic (Claude) judge implementation."""

import logging

from whiskey_agent.core.errors import JudgeUnavailable
from whiskey_agent.core.schema import JudgeVerdict
from whiskey_agent.services.ai.client import AIJudge, AIProvider, parse_verdict
from whiskey_agent.services.ai.prompts import DEDUP_JUDGE_SYSTEM, build_judge_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
MAX_TOKENS = 256


class AnthropicJudge(AIJudge):
    """Dedup judge backed by Anthropic Claude."""

    provider = AIProvider.ANTHROPIC

    def __init__(self, api_key: str, model: str | None = None, timeout: float = 20.0):
        """
        Initialize the Anthropic judge.

        Args:
            api_key: Anthropic API key.
            model: Model name (defaults to a small, fast Claude model).
            timeout: Per-request timeout in seconds.
        """
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic package is required. Install with: pip install anthropic"
            )

        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=1)
        self.model = model or DEFAULT_MODEL

    def judge(self, name_a: str, name_b: str) -> JudgeVerdict:
        """Ask Claude whether two names are the same whiskey."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=DEDUP_JUDGE_SYSTEM,
                messages=[{"role": "user", "content": build_judge_prompt(name_a, name_b)}],
            )
            raw_response = response.content[0].text
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise JudgeUnavailable(f"Anthropic API error: {e}") from e

        logger.debug(f"Raw judge response: {raw_response[:500]}")
        return parse_verdict(raw_response)
