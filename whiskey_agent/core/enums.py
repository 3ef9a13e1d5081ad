"""Enums for whiskey catalog and ingestion fields."""

from enum import Enum


class WhiskeyType(str, Enum):
    """Whiskey category classification."""

    BOURBON = "bourbon"
    SCOTCH = "scotch"
    IRISH = "irish"
    RYE = "rye"
    JAPANESE = "japanese"
    CANADIAN = "canadian"
    SINGLE_MALT = "single_malt"
    BLENDED = "blended"
    OTHER = "other"


class SourceType(str, Enum):
    """Provenance of an availability fact."""

    TEXT_SCRAPE = "text_scrape"
    VISION = "vision"
    REVIEW_MENTION = "review_mention"
    MANUAL = "manual"


class MatchTier(str, Enum):
    """Cascade tier that produced a resolution."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    TOKEN = "token"
    JUDGE = "judge"
    NONE = "none"  # No match, a creation draft was emitted


class CandidateSelection(str, Enum):
    """How the fuzzy and token tiers choose among qualifying candidates."""

    FIRST = "first"
    BEST = "best"
