"""
Whiskey Name Normalizer
=======================

Maps a raw whiskey name from a menu, photo transcription or review to the
canonical key used for identity matching.

Pipeline (strictly ordered, each step feeds the next):
1. Unicode / punctuation cleanup
2. Lowercase
3. Strip leading "the " articles
4. Distillery alias resolution
5. Strip ABV / proof annotations
6. Strip legal-category suffixes
7. Age statement normalization
8. Strip remaining quote characters
9. Drop emptied brackets, trim trailing hyphens and collapse whitespace
"""

from __future__ import annotations

import re
import unicodedata

# Rules are (pattern, replacement) pairs applied in order. Add new entries
# here rather than new code paths.
Rule = tuple[re.Pattern[str], str]

# Unicode / punctuation folding
PUNCTUATION_RULES: list[Rule] = [
    (re.compile(r"\s*[—–]\s*"), " - "),  # em / en dash
    (re.compile(r"[‘’‚‛′‵`]"), "'"),
    (re.compile(r"[“”„‟″‶]"), '"'),
    (re.compile(r"[™®©]"), ""),  # trademark / registered / copyright
]

LEADING_ARTICLE = re.compile(r"^(?:the\s+)+")

# Distillery aliases: every known variant (lowercased) to one spelling.
# Some variants begin with "the", so this runs after the leading-article strip.
DISTILLERY_ALIASES: list[Rule] = [
    (re.compile(r"\bbuffalo\s+trace\s+distillery\b"), "buffalo trace"),
    (re.compile(r"\bthe\s+macallan\b"), "macallan"),
    (re.compile(r"\bthe\s+glenlivet\b"), "glenlivet"),
    (re.compile(r"\bthe\s+glenfarclas\b"), "glenfarclas"),
    (re.compile(r"\bthe\s+dalmore\b"), "dalmore"),
    (re.compile(r"\bthe\s+balvenie\b"), "balvenie"),
    (re.compile(r"\bthe\s+glenrothes\b"), "glenrothes"),
    (re.compile(r"\bthe\s+glendronach\b"), "glendronach"),
    (re.compile(r"\bthe\s+glenmorangie\b"), "glenmorangie"),
    (re.compile(r"\bthe\s+singleton\b"), "singleton"),
    (re.compile(r"\bthe\s+glenturret\b"), "glenturret"),
    (re.compile(r"\bmaker'?s\s+mark\b"), "maker's mark"),
    (re.compile(r"\bwild\s+turkey\s+distillery\b"), "wild turkey"),
    (re.compile(r"\bjack\s+daniel'?s\b"), "jack daniel's"),
    (re.compile(r"\bwoodford\s+reserve\s+distillery\b"), "woodford reserve"),
    (re.compile(r"\bfour\s+roses\s+distillery\b"), "four roses"),
    (re.compile(r"\bheaven\s+hill\s+distillery\b"), "heaven hill"),
    (re.compile(r"\bbrown[-\s]forman\b"), "brown-forman"),
    (re.compile(r"\blaphroaig\s+distillery\b"), "laphroaig"),
    (re.compile(r"\bhighland\s+park\s+distillery\b"), "highland park"),
    (re.compile(r"\bjohnnie\s+walker'?s\b"), "johnnie walker"),
]

# ABV / proof annotations, highest priority first so compound phrasing
# ("ABV 46%", "46% ABV") does not leave an orphaned token behind.
_NUMBER = r"\d+(?:\.\d+)?"
ABV_PROOF_RULES: list[Rule] = [
    (re.compile(rf"\b{_NUMBER}\s*proof\b"), " "),
    (re.compile(rf"\babv\s*:?\s*{_NUMBER}\s*%?"), " "),
    (re.compile(rf"\b{_NUMBER}\s*%\s*abv\b"), " "),
    (re.compile(rf"\b{_NUMBER}\s*%"), " "),
    (re.compile(r"\babv\b"), " "),
]

# Legal-category phrases carry no identity. Qualifiers that do ("single
# barrel", "cask strength", "barrel proof", a bare "single malt") are absent.
_WHISKEY = r"whis(?:key|ky)"
SUFFIX_RULES: list[Rule] = [
    (re.compile(rf"\bkentucky\s+straight\s+bourbon\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bkentucky\s+straight\s+rye\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bstraight\s+bourbon\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bstraight\s+rye\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bblended\s+(?:scotch\s+)?{_WHISKEY}\b"), " "),
    (re.compile(rf"\bsingle\s+malt\s+scotch\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bblended\s+malt\s+scotch\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\birish\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bamerican\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\btennessee\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bjapanese\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bcanadian\s+{_WHISKEY}\b"), " "),
    (re.compile(rf"\bscotch\s+{_WHISKEY}\b"), " "),
    # A trailing run of bare "whiskey" / "distillery"
    (re.compile(rf"(?:\s*\b(?:{_WHISKEY}|distillery))+[\s-]*$"), ""),
]

# Age statements collapse to "<n> year". A bare integer is not an age.
AGE_RULES: list[Rule] = [
    (re.compile(r"\baged\s+(\d+)\s*(?:years?|yrs?|yo)\b"), r"\1 year"),
    (re.compile(r"\b(\d+)[-\s]?(?:(?:years?|yrs?)(?:[-\s]?old)?|yo)\b"), r"\1 year"),
]

# Every double quote, and single quotes that are not an in-word apostrophe.
QUOTE_CHARS = re.compile(r"\"|(?<![a-z0-9])'|'(?![a-z0-9])")

EMPTY_BRACKETS = re.compile(r"\(\s*\)|\[\s*\]")
TRAILING_AGE = re.compile(r"(?<=\S )\d{1,2}(?P<year> year)?$")
TRAILING_JUNK = re.compile(r"[-\s]+$")
WHITESPACE = re.compile(r"\s+")
REPEATED_HYPHENS = re.compile(r"-{2,}")

# Stripping can expose a new leading article or trailing suffix.
_MAX_PASSES = 4


def _apply(rules: list[Rule], s: str) -> str:
    for pattern, replacement in rules:
        s = pattern.sub(replacement, s)
    return s


def normalize_punctuation(s: str) -> str:
    """Fold dashes, quotes and symbol glyphs to plain ASCII and collapse whitespace."""
    s = _apply(PUNCTUATION_RULES, s)
    s = unicodedata.normalize("NFKC", s)
    s = REPEATED_HYPHENS.sub("-", s)
    return WHITESPACE.sub(" ", s).strip()


def resolve_distillery_aliases(s: str) -> str:
    """Resolve known distillery spellings. Expects lowercased input."""
    return _apply(DISTILLERY_ALIASES, s)


def strip_abv_proof(s: str) -> str:
    """Remove "100 proof", "46% ABV", "ABV 46%" and bare "46%" annotations."""
    return _apply(ABV_PROOF_RULES, s)


def strip_marketing_suffixes(s: str) -> str:
    """Remove legal-category phrases and a trailing bare "whiskey"/"distillery"."""
    return _apply(SUFFIX_RULES, s.rstrip())


def normalize_age_statements(s: str) -> str:
    """
    Collapse age statements into "<n> year".

    Handles "12 Year Old", "12 YO", "12yr", "12-Year-Old", "12 Yr Old",
    "Aged 12 Years" and "12 Years".
    """
    return _apply(AGE_RULES, s)


def _normalize_once(s: str) -> str:
    s = normalize_punctuation(s)
    s = s.lower()
    s = LEADING_ARTICLE.sub("", s)
    s = resolve_distillery_aliases(s)
    s = strip_abv_proof(s)
    s = strip_marketing_suffixes(s)
    s = normalize_age_statements(s)
    s = QUOTE_CHARS.sub("", s)
    s = EMPTY_BRACKETS.sub(" ", s)
    s = TRAILING_JUNK.sub("", s)
    return WHITESPACE.sub(" ", s).strip()


def normalize_whiskey_name(name: str | None) -> str:
    """
    Normalize a raw whiskey name to its canonical key.

    Deterministic and total: never raises, and blank input yields "".
    Callers must treat "" as "no identity".

    Args:
        name: Raw display name (should already have pick info removed)

    Returns:
        Canonical key
    """
    if not name:
        return ""

    s = name
    for _ in range(_MAX_PASSES):
        normalized = _normalize_once(s)
        if normalized == s:
            break
        s = normalized
    return s


def age_equivalent_key(key: str) -> str | None:
    """
    The key a trailing age statement would have in its other menu spelling.

    Menus write "Macallan 12" and "Macallan 12 Year Old" for the same bottle.
    Only a trailing one- or two-digit number counts, so "old forester 1920"
    and "weller 107" have no equivalent.

    Examples:
        "macallan 12 year" -> "macallan 12"
        "macallan 12"      -> "macallan 12 year"
        "eagle rare"       -> None
    """
    match = TRAILING_AGE.search(key)
    if match is None:
        return None
    if match.group("year"):
        return key[: match.start("year")].rstrip()
    return f"{key} year"
