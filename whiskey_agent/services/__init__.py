"""Application services for Whiskey Agent."""

from whiskey_agent.services.ai import (
    AIJudge,
    AIProvider,
    get_judge,
)

__all__ = [
    "AIJudge",
    "AIProvider",
    "get_judge",
]
