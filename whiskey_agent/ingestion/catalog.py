"""
Catalog Store Module
====================

The catalog interface the resolver and orchestrator depend on, with a
SQLAlchemy-backed implementation and an in-memory one for tests and dry
runs.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from whiskey_agent.core.enums import WhiskeyType
from whiskey_agent.core.errors import CatalogConflict, CatalogUnavailable
from whiskey_agent.core.schema import RawExtractedEntry
from whiskey_agent.core.schema_canonical import (
    BarAvailabilityFact,
    CanonicalWhiskey,
    WhiskeyDraft,
)
from whiskey_agent.db.repositories import BarWhiskeyRepository, WhiskeyRepository

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


@runtime_checkable
class Catalog(Protocol):
    """Operations the identity resolution pipeline needs from a catalog store."""

    def get_by_canonical_key(self, canonical_key: str) -> CanonicalWhiskey | None:
        """Exact lookup by canonical key."""
        ...

    def scan_prefix(self, prefix: str, limit: int) -> list[CanonicalWhiskey]:
        """Up to ``limit`` whiskeys whose canonical key starts with ``prefix``, in stable order."""
        ...

    def create(self, draft: WhiskeyDraft) -> CanonicalWhiskey:
        """
        Insert a new whiskey.

        Raises:
            CatalogConflict: If the canonical key already exists
            CatalogUnavailable: On any other store failure
        """
        ...

    def fill_missing(self, whiskey_id: UUID, entry: RawExtractedEntry) -> CanonicalWhiskey:
        """Copy entry attributes into empty fields of an existing whiskey."""
        ...

    def upsert_availability(self, fact: BarAvailabilityFact) -> BarAvailabilityFact:
        """Insert or update the fact for its (bar, whiskey) pair."""
        ...


class InMemoryCatalog:
    """
    Dictionary-backed catalog.

    Honors the same uniqueness rules as the SQL store: one whiskey per
    canonical key and one fact per (bar, whiskey) pair.
    """

    def __init__(self, whiskeys: list[CanonicalWhiskey] | None = None) -> None:
        self._whiskeys: dict[UUID, CanonicalWhiskey] = {}
        self._by_key: dict[str, UUID] = {}
        self._facts: dict[tuple[UUID, UUID], BarAvailabilityFact] = {}
        for whiskey in whiskeys or []:
            self.add(whiskey)

    @property
    def whiskeys(self) -> list[CanonicalWhiskey]:
        """All whiskeys in insertion order."""
        return list(self._whiskeys.values())

    @property
    def facts(self) -> list[BarAvailabilityFact]:
        """All availability facts in insertion order."""
        return list(self._facts.values())

    def add(self, whiskey: CanonicalWhiskey) -> CanonicalWhiskey:
        """Store a prebuilt whiskey, enforcing key uniqueness."""
        if whiskey.canonical_key in self._by_key:
            raise CatalogConflict(whiskey.canonical_key)
        self._whiskeys[whiskey.id] = whiskey
        self._by_key[whiskey.canonical_key] = whiskey.id
        return whiskey

    def get(self, whiskey_id: UUID) -> CanonicalWhiskey | None:
        return self._whiskeys.get(whiskey_id)

    def get_fact(self, bar_id: UUID, whiskey_id: UUID) -> BarAvailabilityFact | None:
        return self._facts.get((bar_id, whiskey_id))

    def get_by_canonical_key(self, canonical_key: str) -> CanonicalWhiskey | None:
        whiskey_id = self._by_key.get(canonical_key)
        return self._whiskeys.get(whiskey_id) if whiskey_id else None

    def scan_prefix(self, prefix: str, limit: int) -> list[CanonicalWhiskey]:
        matches = [w for w in self._whiskeys.values() if w.canonical_key.startswith(prefix)]
        return matches[:limit]

    def create(self, draft: WhiskeyDraft) -> CanonicalWhiskey:
        return self.add(draft.to_whiskey())

    def fill_missing(self, whiskey_id: UUID, entry: RawExtractedEntry) -> CanonicalWhiskey:
        whiskey = self._whiskeys.get(whiskey_id)
        if whiskey is None:
            raise CatalogUnavailable(f"Whiskey with id {whiskey_id} not found")

        updates: dict[str, object] = {}
        if whiskey.distillery is None and entry.distillery:
            updates["distillery"] = entry.distillery
        if whiskey.whiskey_type == WhiskeyType.OTHER and entry.whiskey_type not in (
            None,
            WhiskeyType.OTHER,
        ):
            updates["whiskey_type"] = entry.whiskey_type
        if whiskey.age is None and entry.age is not None:
            updates["age"] = entry.age
        if whiskey.abv is None and entry.abv is not None:
            updates["abv"] = entry.abv

        if updates:
            updates["updated_at"] = _utc_now()
            whiskey = whiskey.model_copy(update=updates)
            self._whiskeys[whiskey_id] = whiskey
        return whiskey

    def upsert_availability(self, fact: BarAvailabilityFact) -> BarAvailabilityFact:
        pair = (fact.bar_id, fact.whiskey_id)
        existing = self._facts.get(pair)
        if existing is not None:
            fact = fact.model_copy(update={"first_seen_at": existing.first_seen_at})
        self._facts[pair] = fact
        return fact


class SqlCatalog:
    """
    Catalog backed by the SQLAlchemy models.

    Every write commits on its own, so a failure on one entry never rolls
    back work already done for earlier entries.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.whiskeys = WhiskeyRepository(session)
        self.facts = BarWhiskeyRepository(session)

    def get_by_canonical_key(self, canonical_key: str) -> CanonicalWhiskey | None:
        try:
            return self.whiskeys.get_by_canonical_key(canonical_key)
        except SQLAlchemyError as e:
            raise CatalogUnavailable(f"Lookup of '{canonical_key}' failed: {e}") from e

    def scan_prefix(self, prefix: str, limit: int) -> list[CanonicalWhiskey]:
        try:
            return self.whiskeys.scan_prefix(prefix, limit=limit)
        except SQLAlchemyError as e:
            raise CatalogUnavailable(f"Prefix scan for '{prefix}' failed: {e}") from e

    def create(self, draft: WhiskeyDraft) -> CanonicalWhiskey:
        try:
            whiskey = self.whiskeys.create(draft.to_whiskey())
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"IntegrityError creating whiskey '{draft.canonical_key}': {e.orig}")
            raise CatalogConflict(draft.canonical_key) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CatalogUnavailable(f"Creating '{draft.canonical_key}' failed: {e}") from e

        logger.info(f"Created whiskey: {whiskey.display_name} ({whiskey.id})")
        return whiskey

    def fill_missing(self, whiskey_id: UUID, entry: RawExtractedEntry) -> CanonicalWhiskey:
        try:
            whiskey = self.whiskeys.fill_missing(whiskey_id, entry)
            self.session.commit()
        except ValueError as e:
            self.session.rollback()
            raise CatalogUnavailable(str(e)) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CatalogUnavailable(f"Updating whiskey {whiskey_id} failed: {e}") from e
        return whiskey

    def upsert_availability(self, fact: BarAvailabilityFact) -> BarAvailabilityFact:
        try:
            stored = self.facts.update(fact)
            if stored is None:
                try:
                    stored = self.facts.insert(fact)
                    self.session.commit()
                except IntegrityError:
                    # Another writer inserted the pair between our check and insert
                    self.session.rollback()
                    logger.warning(
                        f"IntegrityError inserting fact for bar {fact.bar_id}, "
                        f"whiskey {fact.whiskey_id}; updating instead"
                    )
                    stored = self.facts.update(fact)
                    if stored is None:
                        raise CatalogUnavailable(
                            f"Fact for bar {fact.bar_id}, whiskey {fact.whiskey_id} vanished"
                        )
                    self.session.commit()
            else:
                self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CatalogUnavailable(f"Upserting availability failed: {e}") from e
        return stored
