"""
Whiskey Resolver Module
=======================

Matches a raw whiskey name against the catalog through a strictly ordered
cascade, cheapest and most certain tier first:

1. Exact: canonical key lookup, also under the other spelling of a
   trailing age ("macallan 12" and "macallan 12 year")
2. Fuzzy: edit similarity over a prefix-scanned candidate set
3. Token: word-overlap similarity over the same candidates
4. Judge: semantic oracle for the remaining near misses
5. None: emit a creation draft
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

from whiskey_agent.core.enums import CandidateSelection, MatchTier, WhiskeyType
from whiskey_agent.core.errors import CatalogConflict, InputRejected, JudgeUnavailable
from whiskey_agent.core.schema import JudgeVerdict, RawExtractedEntry
from whiskey_agent.core.schema_canonical import CanonicalWhiskey, WhiskeyDraft
from whiskey_agent.ingestion.config import JudgeConfig, ResolutionConfig
from whiskey_agent.ingestion.normalizer import age_equivalent_key, normalize_whiskey_name
from whiskey_agent.ingestion.picks import parse_private_barrel
from whiskey_agent.ingestion.similarity import numeric_tokens, similarity_ratio, token_similarity

if TYPE_CHECKING:
    from whiskey_agent.ingestion.catalog import Catalog
    from whiskey_agent.ingestion.config import AgentConfig
    from whiskey_agent.ingestion.judge import DedupJudge

logger = logging.getLogger(__name__)


@dataclass
class MatchCandidate:
    """A catalog whiskey scored against the current entry."""

    whiskey: CanonicalWhiskey
    edit_score: float
    token_score: float
    numbers_match: bool = True  # Numeric tokens (ages, batch numbers) agree


@dataclass
class ResolutionResult:
    """Outcome of resolving one raw entry."""

    base_name: str
    canonical_key: str
    pick_info: str | None = None

    tier: MatchTier = MatchTier.NONE
    whiskey_id: UUID | None = None
    candidate: MatchCandidate | None = None
    verdict: JudgeVerdict | None = None

    # Set only when tier is NONE
    draft: WhiskeyDraft | None = None

    notes: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.whiskey_id is not None


class WhiskeyResolver:
    """
    Resolves raw extracted entries to canonical whiskeys.

    The judge is optional; without one the cascade ends at the token tier.
    """

    def __init__(
        self,
        catalog: Catalog,
        judge: DedupJudge | None = None,
        config: ResolutionConfig | None = None,
        judge_config: JudgeConfig | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            catalog: Catalog store to match against and create in
            judge: Optional semantic judge for ambiguous candidates
            config: Thresholds and candidate policy
            judge_config: Judge candidate cap and acceptance confidence
        """
        self.catalog = catalog
        self.judge = judge
        self.config = config or ResolutionConfig()
        self.judge_config = judge_config or JudgeConfig()

    @classmethod
    def from_config(
        cls, catalog: Catalog, config: AgentConfig, judge: DedupJudge | None = None
    ) -> WhiskeyResolver:
        """Create resolver from configuration."""
        return cls(
            catalog=catalog,
            judge=judge,
            config=config.resolution,
            judge_config=config.judge,
        )

    def resolve(self, entry: RawExtractedEntry) -> ResolutionResult:
        """
        Resolve an entry to an existing whiskey or a creation draft.

        Args:
            entry: Validated raw entry

        Returns:
            ResolutionResult with either ``whiskey_id`` or ``draft`` set

        Raises:
            InputRejected: If the name carries no identity
            CatalogUnavailable: If the catalog cannot be queried
            JudgeUnavailable: If the judge fails while being consulted
        """
        parsed = parse_private_barrel(entry.name)
        key = normalize_whiskey_name(parsed.base_name)
        if not key:
            raise InputRejected("name normalizes to an empty key", name=entry.name)

        result = ResolutionResult(
            base_name=parsed.base_name,
            canonical_key=key,
            pick_info=parsed.pick_info,
        )

        # 1. Exact, also under the other spelling of a trailing age
        existing = self.catalog.get_by_canonical_key(key)
        alternate = age_equivalent_key(key)
        if existing is None and alternate is not None:
            existing = self.catalog.get_by_canonical_key(alternate)
        if existing is not None:
            logger.debug(f"Exact match for '{key}': {existing.id}")
            candidate = MatchCandidate(whiskey=existing, edit_score=1.0, token_score=1.0)
            return self._accept(result, MatchTier.EXACT, candidate)

        first_token = key.split(" ", 1)[0]
        if not first_token:
            return self._draft(result, entry)

        candidates = [
            self._score(key, whiskey)
            for whiskey in self.catalog.scan_prefix(first_token, self.config.candidate_limit)
            if whiskey.canonical_key != key
        ]
        logger.debug(f"{len(candidates)} candidates for '{key}' (prefix '{first_token}')")

        # 2. Fuzzy
        fuzzy = self._select(
            [
                c
                for c in candidates
                if self._guard_ok(c) and c.edit_score >= self.config.fuzzy_threshold
            ],
            lambda c: c.edit_score,
        )
        if fuzzy is not None:
            logger.debug(
                f"Fuzzy match '{key}' ~ '{fuzzy.whiskey.canonical_key}' ({fuzzy.edit_score:.2f})"
            )
            return self._accept(result, MatchTier.FUZZY, fuzzy)

        # 3. Token
        token = self._select(
            [
                c
                for c in candidates
                if self._guard_ok(c) and c.token_score >= self.config.token_threshold
            ],
            lambda c: c.token_score,
        )
        if token is not None:
            logger.debug(
                f"Token match '{key}' ~ '{token.whiskey.canonical_key}' ({token.token_score:.2f})"
            )
            return self._accept(result, MatchTier.TOKEN, token)

        # 4. Judge
        if self.judge is not None:
            judged = self._consult_judge(self.judge, entry.name, candidates, result)
            if judged is not None:
                return self._accept(result, MatchTier.JUDGE, judged)

        # 5. None
        return self._draft(result, entry)

    def resolve_or_create(
        self, entry: RawExtractedEntry
    ) -> tuple[CanonicalWhiskey, bool, ResolutionResult]:
        """
        Resolve an entry and make sure a catalog whiskey exists for it.

        A matched whiskey gets its empty attributes filled from the entry.
        A draft is inserted; if another writer inserted the same canonical
        key first, the winner is re-fetched and used instead.

        Returns:
            Tuple of (whiskey, created, result)

        Raises:
            CatalogConflict: If the insert conflicted and the winner cannot be found
        """
        result = self.resolve(entry)

        if result.whiskey_id is not None:
            whiskey = self.catalog.fill_missing(result.whiskey_id, entry)
            return whiskey, False, result

        draft = result.draft
        if draft is None:
            raise ValueError(f"Unresolved entry '{entry.name}' has no draft")
        try:
            whiskey = self.catalog.create(draft)
        except CatalogConflict:
            winner = self.catalog.get_by_canonical_key(result.canonical_key)
            if winner is None:
                raise
            logger.warning(
                f"Concurrent insert of '{result.canonical_key}', using existing whiskey {winner.id}"
            )
            result.notes.append("Recovered from concurrent insert")
            self._accept(result, MatchTier.EXACT, MatchCandidate(winner, 1.0, 1.0))
            whiskey = self.catalog.fill_missing(winner.id, entry)
            return whiskey, False, result

        return whiskey, True, result

    def _score(self, key: str, whiskey: CanonicalWhiskey) -> MatchCandidate:
        return MatchCandidate(
            whiskey=whiskey,
            edit_score=similarity_ratio(key, whiskey.canonical_key),
            token_score=token_similarity(key, whiskey.canonical_key),
            numbers_match=numeric_tokens(key) == numeric_tokens(whiskey.canonical_key),
        )

    def _guard_ok(self, candidate: MatchCandidate) -> bool:
        return candidate.numbers_match or not self.config.numeric_guard

    def _select(
        self, qualifying: list[MatchCandidate], score: Callable[[MatchCandidate], float]
    ) -> MatchCandidate | None:
        if not qualifying:
            return None
        if self.config.selection == CandidateSelection.BEST:
            # max() keeps the first of equal scores, so ties stay in scan order
            return max(qualifying, key=score)
        return qualifying[0]

    def _consult_judge(
        self,
        judge: DedupJudge,
        name: str,
        candidates: list[MatchCandidate],
        result: ResolutionResult,
    ) -> MatchCandidate | None:
        pool = [
            c
            for c in candidates
            if c.edit_score >= self.config.judge_edit_floor
            or c.token_score >= self.config.judge_token_floor
        ][: self.judge_config.max_candidates]

        for candidate in pool:
            try:
                verdict = judge.judge(name, candidate.whiskey.display_name)
            except JudgeUnavailable:
                raise
            except Exception as e:
                raise JudgeUnavailable(f"Judge failed on '{name}': {e}") from e

            logger.debug(
                f"Judge '{name}' vs '{candidate.whiskey.display_name}': "
                f"same={verdict.same_product} confidence={verdict.confidence:.2f}"
            )
            if verdict.same_product and verdict.confidence > self.judge_config.min_confidence:
                result.verdict = verdict
                if verdict.reasoning:
                    result.notes.append(f"Judge: {verdict.reasoning}")
                return candidate
        return None

    def _accept(
        self, result: ResolutionResult, tier: MatchTier, candidate: MatchCandidate
    ) -> ResolutionResult:
        result.tier = tier
        result.whiskey_id = candidate.whiskey.id
        result.candidate = candidate
        result.draft = None
        result.notes.append(
            f"Matched '{candidate.whiskey.display_name}' via {tier.value} "
            f"(edit={candidate.edit_score:.2f}, token={candidate.token_score:.2f})"
        )
        return result

    def _draft(self, result: ResolutionResult, entry: RawExtractedEntry) -> ResolutionResult:
        description_parts = []
        if entry.notes:
            description_parts.append(entry.notes)
        if result.pick_info:
            description_parts.append(f"Pick: {result.pick_info}")

        result.tier = MatchTier.NONE
        result.draft = WhiskeyDraft(
            display_name=result.base_name,
            canonical_key=result.canonical_key,
            distillery=entry.distillery,
            whiskey_type=entry.whiskey_type or WhiskeyType.OTHER,
            age=entry.age,
            abv=entry.abv,
            description="; ".join(description_parts) or None,
            pick_info=result.pick_info,
        )
        result.notes.append(f"No match for '{result.canonical_key}', new whiskey")
        logger.debug(f"No match for '{result.canonical_key}', drafting new whiskey")
        return result
