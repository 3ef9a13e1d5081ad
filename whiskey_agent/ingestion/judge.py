"""
Dedup Judge Interface
=====================

The resolver's escape hatch for ambiguous names. Implementations decide
whether two display names denote the same whiskey product; the resolver
only depends on this narrow interface.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from whiskey_agent.core.schema import JudgeVerdict


@runtime_checkable
class DedupJudge(Protocol):
    """Semantic same-product oracle."""

    def judge(self, name_a: str, name_b: str) -> JudgeVerdict:
        """
        Compare two whiskey names.

        Raises:
            JudgeUnavailable: If the judge cannot produce a verdict
        """
        ...
