"""OpenAI judge implementation."""

import logging

from whiskey_agent.core.errors import JudgeUnavailable
from whiskey_agent.core.schema import JudgeVerdict
from whiskey_agent.services.ai.client import AIJudge, AIProvider, parse_verdict
from whiskey_agent.services.ai.prompts import DEDUP_JUDGE_SYSTEM, build_judge_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_TOKENS = 256


class OpenAIJudge(AIJudge):
    """Dedup judge backed by OpenAI chat completions."""

    provider = AIProvider.OPENAI

    def __init__(self, api_key: str, model: str | None = None, timeout: float = 20.0):
        """
        Initialize the OpenAI judge.

        Args:
            api_key: OpenAI API key.
            model: Model name (defaults to gpt-4o-mini).
            timeout: Per-request timeout in seconds.
        """
        try:
            import openai
        except ImportError:
            raise ImportError("openai package is required. Install with: pip install openai")

        self.client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=1)
        self.model = model or DEFAULT_MODEL

    def judge(self, name_a: str, name_b: str) -> JudgeVerdict:
        """Ask the model whether two names are the same whiskey."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                messages=[
                    {"role": "system", "content": DEDUP_JUDGE_SYSTEM},
                    {"role": "user", "content": build_judge_prompt(name_a, name_b)},
                ],
                response_format={"type": "json_object"},
            )
            raw_response = response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise JudgeUnavailable(f"OpenAI API error: {e}") from e

        logger.debug(f"Raw judge response: {raw_response[:500]}")
        return parse_verdict(raw_response)
