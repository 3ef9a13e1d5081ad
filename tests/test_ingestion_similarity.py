"""Tests for the similarity scorers."""

import pytest

from whiskey_agent.ingestion.similarity import (
    levenshtein_distance,
    numeric_tokens,
    similarity_ratio,
    token_similarity,
    tokenize,
)

NAME_PAIRS = [
    ("Buffalo Trace", "Buffalo Trace Kentucky Straight Bourbon Whiskey"),
    ("Lagavulin 16", "Lagavulin 8"),
    ("Laphroaig 10", "Laphroaig 10 Cask Strength"),
    ("Eagle Rare", "Blanton's Original Single Barrel"),
    ("", "Weller 12"),
]


class TestLevenshteinDistance:
    """Tests for levenshtein_distance."""

    def test_identical(self) -> None:
        """Test distance for identical strings."""
        assert levenshtein_distance("weller", "weller") == 0

    def test_classic_example(self) -> None:
        """Test the kitten/sitting example."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_empty(self) -> None:
        """Test distance against an empty string is the other length."""
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "") == 0

    def test_symmetric(self) -> None:
        """Test argument order does not matter."""
        assert levenshtein_distance("lagavulin 16", "lagavulin 8") == 2
        assert levenshtein_distance("lagavulin 8", "lagavulin 16") == 2


class TestSimilarityRatio:
    """Tests for similarity_ratio."""

    def test_same_canonical_key(self) -> None:
        """Test names that normalize to the same key score 1.0."""
        assert similarity_ratio(
            "Buffalo Trace", "Buffalo Trace Kentucky Straight Bourbon Whiskey"
        ) == 1.0

    def test_empty_keys(self) -> None:
        """Test both-empty scores 1.0 and one-empty scores 0.0."""
        assert similarity_ratio("", "   ") == 1.0
        assert similarity_ratio("", "Weller 12") == 0.0
        assert similarity_ratio("Weller 12", "") == 0.0

    def test_different_ages_below_fuzzy_threshold(self) -> None:
        """Test Lagavulin 16 and 8 stay below the default fuzzy threshold."""
        assert similarity_ratio("Lagavulin 16", "Lagavulin 8") == pytest.approx(1 - 2 / 12)
        assert similarity_ratio("Lagavulin 16", "Lagavulin 8") < 0.85

    def test_single_typo_is_high(self) -> None:
        """Test a one-character typo scores above the fuzzy threshold."""
        assert similarity_ratio("Elijah Craig Small Batch", "Elijah Craig Smal Batch") > 0.95

    @pytest.mark.parametrize("a,b", NAME_PAIRS)
    def test_commutative_and_bounded(self, a: str, b: str) -> None:
        """Test the ratio is commutative and within [0, 1]."""
        assert similarity_ratio(a, b) == similarity_ratio(b, a)
        assert 0.0 <= similarity_ratio(a, b) <= 1.0

    @pytest.mark.parametrize("name", ["Weller 12", "THE Macallan 12 Year Old", "Ardbeg 10 (46%)"])
    def test_identity(self, name: str) -> None:
        """Test a name scores 1.0 against itself."""
        assert similarity_ratio(name, name) == 1.0


class TestTokenSimilarity:
    """Tests for token_similarity."""

    def test_order_independent(self) -> None:
        """Test token order does not matter."""
        assert token_similarity("Laphroaig 10", "10 Laphroaig") == 1.0

    def test_stop_words_ignored(self) -> None:
        """Test filler words do not count as tokens."""
        assert tokenize("spirit of the highlands") == ["spirit", "highlands"]
        assert token_similarity("Spirit of the Highlands", "Spirit Highlands") == 1.0

    def test_hyphen_splits_tokens(self) -> None:
        """Test hyphens separate tokens and punctuation is dropped."""
        assert tokenize("brown-forman old no. 7") == ["brown", "forman", "old", "no", "7"]

    def test_duplicates_counted_as_multiset(self) -> None:
        """Test repeated tokens only match as often as they occur on both sides."""
        assert token_similarity("Wild Turkey Turkey", "Wild Turkey") == pytest.approx(4 / 5)

    def test_partial_overlap(self) -> None:
        """Test Sørensen-Dice over partially shared tokens."""
        assert token_similarity("Laphroaig 10", "Laphroaig 10 Cask Strength") == pytest.approx(
            2 / 3
        )

    def test_empty_tokens(self) -> None:
        """Test both-empty scores 1.0 and one-empty scores 0.0."""
        assert token_similarity("", "") == 1.0
        assert token_similarity("of the", "") == 1.0
        assert token_similarity("", "Weller 12") == 0.0

    @pytest.mark.parametrize("a,b", NAME_PAIRS)
    def test_commutative_and_bounded(self, a: str, b: str) -> None:
        """Test the score is commutative and within [0, 1]."""
        assert token_similarity(a, b) == token_similarity(b, a)
        assert 0.0 <= token_similarity(a, b) <= 1.0


class TestNumericTokens:
    """Tests for numeric_tokens."""

    def test_extracts_numbers_in_order(self) -> None:
        """Test age and batch numbers are extracted."""
        assert numeric_tokens("elijah craig barrel proof c923 12 year") == ["923", "12"]

    def test_no_numbers(self) -> None:
        """Test a key without digits yields an empty list."""
        assert numeric_tokens("eagle rare") == []
