"""LLM-backed dedup judges for Whiskey Agent."""

from whiskey_agent.services.ai.client import AIJudge, AIProvider, get_judge, parse_verdict

__all__ = [
    "AIJudge",
    "AIProvider",
    "get_judge",
    "parse_verdict",
]
