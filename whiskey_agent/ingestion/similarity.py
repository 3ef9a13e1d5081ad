"""
Similarity Scorers
==================

Edit-distance and token-overlap similarity between whiskey names. Both
scorers normalize their inputs first, are commutative, and return a value
in [0, 1] where 1.0 means identical canonical keys.
"""

from __future__ import annotations

import re
from collections import Counter

from whiskey_agent.ingestion.normalizer import normalize_whiskey_name

# Filler words excluded from token scoring
STOP_WORDS = frozenset({"a", "an", "of", "and", "in", "the", "by", "for"})

TOKEN_SPLIT = re.compile(r"[\s\-]+")
NON_ALNUM = re.compile(r"[^a-z0-9]")
NUMBER = re.compile(r"\d+(?:\.\d+)?")


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings using a two-row rolling table."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[-1]


def similarity_ratio(a: str, b: str) -> float:
    """
    Normalized edit similarity: 1 - distance / length of the longer key.

    Two empty keys score 1.0; exactly one empty key scores 0.0.
    """
    s1 = normalize_whiskey_name(a)
    s2 = normalize_whiskey_name(b)

    if s1 == s2:
        return 1.0
    longest = max(len(s1), len(s2))
    if not s1 or not s2:
        return 0.0

    return 1.0 - levenshtein_distance(s1, s2) / longest


def tokenize(key: str) -> list[str]:
    """Split a canonical key into scoring tokens, dropping stop words."""
    tokens = (NON_ALNUM.sub("", t) for t in TOKEN_SPLIT.split(key))
    return [t for t in tokens if t and t not in STOP_WORDS]


def token_similarity(a: str, b: str) -> float:
    """
    Order-independent Sørensen-Dice coefficient over word tokens.

    Duplicate tokens are matched as a multiset, so "a a b" against "a b"
    shares two tokens, not three.
    """
    tokens_a = tokenize(normalize_whiskey_name(a))
    tokens_b = tokenize(normalize_whiskey_name(b))

    if not tokens_a and not tokens_b:
        return 1.0
    if not tokens_a or not tokens_b:
        return 0.0

    shared = sum((Counter(tokens_a) & Counter(tokens_b)).values())
    return 2 * shared / (len(tokens_a) + len(tokens_b))


def numeric_tokens(key: str) -> list[str]:
    """Numbers appearing in a canonical key, in order (age statements, batch numbers)."""
    return NUMBER.findall(key)
