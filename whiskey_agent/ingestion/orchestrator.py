"""
Ingestion Orchestrator Module
=============================

Drives one extracted menu through the resolver and records a bar
availability fact for every resolved whiskey.

Per-entry outcomes:
- created: a new catalog whiskey was minted
- updated: the entry matched an existing whiskey
- skipped: the entry was malformed or carried no identity
- failed: the catalog or judge was unavailable for this entry

One bad entry never aborts the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from whiskey_agent.core.errors import (
    CatalogConflict,
    CatalogUnavailable,
    InputRejected,
    JudgeUnavailable,
)
from whiskey_agent.core.schema import ExtractedMenu, RawExtractedEntry
from whiskey_agent.core.schema_canonical import BarAvailabilityFact
from whiskey_agent.ingestion.catalog import Catalog
from whiskey_agent.ingestion.config import AgentConfig
from whiskey_agent.ingestion.judge import DedupJudge
from whiskey_agent.ingestion.resolver import ResolutionResult, WhiskeyResolver

logger = logging.getLogger(__name__)

SKIPPED = "skipped"
FAILED = "failed"


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


@dataclass
class EntryFailure:
    """Why a single entry was skipped or failed."""

    index: int
    name: str | None
    reason: str
    kind: str  # "skipped" or "failed"

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "name": self.name, "reason": self.reason, "kind": self.kind}


@dataclass
class IngestionResult:
    """Summary of one ingested menu."""

    job_id: str
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[EntryFailure] = field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_seconds: float | None = None

    @property
    def processed(self) -> int:
        return self.created + self.updated + self.skipped + self.failed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "job_id": self.job_id,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "failures": [f.to_dict() for f in self.failures],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class IngestionOrchestrator:
    """Runs extracted menus through identity resolution into the catalog."""

    def __init__(self, catalog: Catalog, resolver: WhiskeyResolver) -> None:
        self.catalog = catalog
        self.resolver = resolver

    @classmethod
    def from_config(
        cls,
        catalog: Catalog,
        config: AgentConfig | None = None,
        judge: DedupJudge | None = None,
    ) -> IngestionOrchestrator:
        """Create an orchestrator whose resolver shares the given catalog."""
        config = config or AgentConfig()
        return cls(catalog, WhiskeyResolver.from_config(catalog, config, judge=judge))

    def ingest_menu(
        self, bar_id: UUID, menu: ExtractedMenu, job_id: str | None = None
    ) -> IngestionResult:
        """
        Ingest every entry of a menu for one bar.

        Args:
            bar_id: Bar the menu belongs to
            menu: Extracted menu batch
            job_id: Optional job identifier stamped on every fact

        Returns:
            IngestionResult with per-outcome counts and failure attribution
        """
        result = IngestionResult(job_id=job_id or str(uuid4()), started_at=_utc_now())
        logger.info(
            f"Ingesting {len(menu.whiskeys)} entries for bar {bar_id} (job {result.job_id})"
        )

        for index, payload in enumerate(menu.whiskeys):
            self._ingest_entry(index, payload, bar_id, menu, result)

        result.completed_at = _utc_now()
        result.duration_seconds = (result.completed_at - result.started_at).total_seconds()
        logger.info(
            f"Job {result.job_id} done: {result.created} created, {result.updated} updated, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result

    def _ingest_entry(
        self,
        index: int,
        payload: Any,
        bar_id: UUID,
        menu: ExtractedMenu,
        result: IngestionResult,
    ) -> None:
        raw_name = payload.get("name") if isinstance(payload, dict) else None

        try:
            entry = RawExtractedEntry.model_validate(payload)
        except ValidationError as e:
            reason = f"invalid entry: {e.error_count()} errors"
            self._record(result, index, raw_name, reason, SKIPPED)
            return

        try:
            if not entry.name.strip():
                raise InputRejected("empty name", name=entry.name)
            whiskey, created, resolution = self.resolver.resolve_or_create(entry)
            self.catalog.upsert_availability(
                BarAvailabilityFact(
                    bar_id=bar_id,
                    whiskey_id=whiskey.id,
                    price=entry.price,
                    pour_size=entry.pour_size,
                    available=True,
                    notes=self._fact_notes(entry, resolution),
                    source_type=menu.source_type,
                    confidence=menu.confidence,
                    is_stale=False,
                    source_job_id=result.job_id,
                )
            )
        except InputRejected as e:
            self._record(result, index, entry.name, e.reason, SKIPPED)
            return
        except CatalogConflict as e:
            self._record(result, index, entry.name, str(e), SKIPPED)
            return
        except (CatalogUnavailable, JudgeUnavailable) as e:
            self._record(result, index, entry.name, str(e), FAILED)
            return

        if created:
            result.created += 1
        else:
            result.updated += 1
        logger.debug(
            f"Entry {index} '{entry.name}' -> {whiskey.id} "
            f"({resolution.tier.value}, {'created' if created else 'matched'})"
        )

    @staticmethod
    def _fact_notes(entry: RawExtractedEntry, resolution: ResolutionResult) -> str | None:
        parts = []
        if entry.notes:
            parts.append(entry.notes)
        if resolution.pick_info:
            parts.append(f"Pick: {resolution.pick_info}")
        return "; ".join(parts) or None

    @staticmethod
    def _record(
        result: IngestionResult, index: int, name: str | None, reason: str, kind: str
    ) -> None:
        if kind == FAILED:
            result.failed += 1
            logger.warning(f"Entry {index} '{name}' failed: {reason}")
        else:
            result.skipped += 1
            logger.warning(f"Entry {index} '{name}' skipped: {reason}")
        result.failures.append(EntryFailure(index=index, name=name, reason=reason, kind=kind))


def ingest_menu(
    catalog: Catalog,
    bar_id: UUID,
    menu: ExtractedMenu,
    judge: DedupJudge | None = None,
    config: AgentConfig | None = None,
    job_id: str | None = None,
) -> IngestionResult:
    """
    Ingest a menu against a catalog in one call.

    Builds a resolver from ``config`` (defaults when None) with the given
    judge, then runs the batch.
    """
    orchestrator = IngestionOrchestrator.from_config(catalog, config=config, judge=judge)
    return orchestrator.ingest_menu(bar_id, menu, job_id=job_id)
