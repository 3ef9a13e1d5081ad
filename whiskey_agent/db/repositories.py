"""Repository classes for database operations.

Repositories flush but never commit; transaction boundaries belong to the
caller (see ``whiskey_agent.ingestion.catalog.SqlCatalog``).
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from whiskey_agent.core.enums import SourceType, WhiskeyType
from whiskey_agent.core.schema import RawExtractedEntry
from whiskey_agent.core.schema_canonical import Bar, BarAvailabilityFact, CanonicalWhiskey
from whiskey_agent.db.models import BarDB, BarWhiskeyDB, WhiskeyDB


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class BarRepository:
    """Repository for Bar operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, bar: Bar) -> Bar:
        """Create a new bar."""
        db_item = BarDB(
            id=str(bar.id),
            name=bar.name,
            city=bar.city,
            created_at=bar.created_at,
        )
        self.session.add(db_item)
        self.session.flush()
        return self._to_domain(db_item)

    def get_by_id(self, bar_id: UUID | str) -> Bar | None:
        """Get a bar by ID."""
        stmt = select(BarDB).where(BarDB.id == str(bar_id))
        db_item = self.session.execute(stmt).scalar_one_or_none()
        return self._to_domain(db_item) if db_item else None

    def get_by_name(self, name: str) -> Bar | None:
        """Get a bar by exact name (case-insensitive)."""
        stmt = (
            select(BarDB)
            .where(func.lower(BarDB.name) == name.strip().lower())
            .order_by(BarDB.created_at)
            .limit(1)
        )
        db_item = self.session.execute(stmt).scalar_one_or_none()
        return self._to_domain(db_item) if db_item else None

    def get_or_create(self, name: str, city: str | None = None) -> Bar:
        """
        Look up a bar by name, creating it if absent.

        Args:
            name: Bar name.
            city: City recorded when the bar is created.

        Returns:
            The existing or newly created Bar.
        """
        existing = self.get_by_name(name)
        if existing is not None:
            return existing
        return self.create(Bar(name=name, city=city))

    def list_all(self) -> list[Bar]:
        """List all bars ordered by name."""
        stmt = select(BarDB).order_by(BarDB.name)
        return [self._to_domain(item) for item in self.session.execute(stmt).scalars().all()]

    def _to_domain(self, db_item: BarDB) -> Bar:
        return Bar(
            id=UUID(db_item.id),
            name=db_item.name,
            city=db_item.city,
            created_at=db_item.created_at,
        )


class WhiskeyRepository:
    """Repository for CanonicalWhiskey operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, whiskey: CanonicalWhiskey) -> CanonicalWhiskey:
        """
        Create a new canonical whiskey.

        Raises:
            sqlalchemy.exc.IntegrityError: If the canonical key already exists.
        """
        db_item = WhiskeyDB(
            id=str(whiskey.id),
            display_name=whiskey.display_name,
            canonical_key=whiskey.canonical_key,
            distillery=whiskey.distillery,
            whiskey_type=whiskey.whiskey_type.value,
            age=whiskey.age,
            abv=whiskey.abv,
            description=whiskey.description,
            created_at=whiskey.created_at,
            updated_at=whiskey.updated_at,
        )
        self.session.add(db_item)
        self.session.flush()
        return self._to_domain(db_item)

    def get_by_id(self, whiskey_id: UUID | str) -> CanonicalWhiskey | None:
        """Get a whiskey by ID."""
        db_item = self._get_db(whiskey_id)
        return self._to_domain(db_item) if db_item else None

    def get_by_canonical_key(self, canonical_key: str) -> CanonicalWhiskey | None:
        """Get a whiskey by its unique canonical key."""
        stmt = select(WhiskeyDB).where(WhiskeyDB.canonical_key == canonical_key)
        db_item = self.session.execute(stmt).scalar_one_or_none()
        return self._to_domain(db_item) if db_item else None

    def scan_prefix(self, prefix: str, limit: int = 50) -> list[CanonicalWhiskey]:
        """
        List whiskeys whose canonical key starts with ``prefix``.

        Results come back in creation order so repeated scans are stable.
        """
        stmt = (
            select(WhiskeyDB)
            .where(WhiskeyDB.canonical_key.startswith(prefix, autoescape=True))
            .order_by(WhiskeyDB.created_at, WhiskeyDB.id)
            .limit(limit)
        )
        return [self._to_domain(item) for item in self.session.execute(stmt).scalars().all()]

    def fill_missing(self, whiskey_id: UUID | str, entry: RawExtractedEntry) -> CanonicalWhiskey:
        """
        Copy attributes from an entry into fields that are still empty.

        The display name and canonical key are never touched.

        Raises:
            ValueError: If the whiskey does not exist.
        """
        db_item = self._get_db(whiskey_id)
        if db_item is None:
            raise ValueError(f"Whiskey with id {whiskey_id} not found")

        changed = False
        if db_item.distillery is None and entry.distillery:
            db_item.distillery = entry.distillery
            changed = True
        if db_item.whiskey_type == WhiskeyType.OTHER.value and entry.whiskey_type not in (
            None,
            WhiskeyType.OTHER,
        ):
            db_item.whiskey_type = entry.whiskey_type.value
            changed = True
        if db_item.age is None and entry.age is not None:
            db_item.age = entry.age
            changed = True
        if db_item.abv is None and entry.abv is not None:
            db_item.abv = entry.abv
            changed = True

        if changed:
            db_item.updated_at = _utc_now()
            self.session.flush()
        return self._to_domain(db_item)

    def count(self) -> int:
        """Count all whiskeys."""
        return self.session.execute(select(func.count(WhiskeyDB.id))).scalar_one()

    def list_all(self, limit: int = 100, offset: int = 0) -> list[CanonicalWhiskey]:
        """List whiskeys ordered by display name."""
        stmt = select(WhiskeyDB).order_by(WhiskeyDB.display_name).limit(limit).offset(offset)
        return [self._to_domain(item) for item in self.session.execute(stmt).scalars().all()]

    def _get_db(self, whiskey_id: UUID | str) -> WhiskeyDB | None:
        stmt = select(WhiskeyDB).where(WhiskeyDB.id == str(whiskey_id))
        return self.session.execute(stmt).scalar_one_or_none()

    def _to_domain(self, db_item: WhiskeyDB) -> CanonicalWhiskey:
        return CanonicalWhiskey(
            id=UUID(db_item.id),
            display_name=db_item.display_name,
            canonical_key=db_item.canonical_key,
            distillery=db_item.distillery,
            whiskey_type=WhiskeyType(db_item.whiskey_type),
            age=db_item.age,
            abv=db_item.abv,
            description=db_item.description,
            created_at=db_item.created_at,
            updated_at=db_item.updated_at,
        )


class BarWhiskeyRepository:
    """Repository for BarAvailabilityFact operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, bar_id: UUID | str, whiskey_id: UUID | str) -> BarAvailabilityFact | None:
        """Get the fact for a (bar, whiskey) pair."""
        db_item = self._get_db(bar_id, whiskey_id)
        return self._to_domain(db_item) if db_item else None

    def insert(self, fact: BarAvailabilityFact) -> BarAvailabilityFact:
        """
        Insert a new fact.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair already has a fact.
        """
        db_item = BarWhiskeyDB(
            bar_id=str(fact.bar_id),
            whiskey_id=str(fact.whiskey_id),
            first_seen_at=fact.first_seen_at,
        )
        self._apply(db_item, fact)
        self.session.add(db_item)
        self.session.flush()
        return self._to_domain(db_item)

    def update(self, fact: BarAvailabilityFact) -> BarAvailabilityFact | None:
        """
        Overwrite the mutable fields of an existing fact.

        ``first_seen_at`` is preserved.

        Returns:
            The updated fact, or None if the pair has no fact yet.
        """
        db_item = self._get_db(fact.bar_id, fact.whiskey_id)
        if db_item is None:
            return None
        self._apply(db_item, fact)
        self.session.flush()
        return self._to_domain(db_item)

    def list_for_bar(self, bar_id: UUID | str) -> list[BarAvailabilityFact]:
        """List all facts for a bar."""
        stmt = (
            select(BarWhiskeyDB)
            .where(BarWhiskeyDB.bar_id == str(bar_id))
            .order_by(BarWhiskeyDB.first_seen_at)
        )
        return [self._to_domain(item) for item in self.session.execute(stmt).scalars().all()]

    def count(self) -> int:
        """Count all facts."""
        return self.session.execute(select(func.count(BarWhiskeyDB.id))).scalar_one()

    def _get_db(self, bar_id: UUID | str, whiskey_id: UUID | str) -> BarWhiskeyDB | None:
        stmt = select(BarWhiskeyDB).where(
            BarWhiskeyDB.bar_id == str(bar_id),
            BarWhiskeyDB.whiskey_id == str(whiskey_id),
        )
        return self.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _apply(db_item: BarWhiskeyDB, fact: BarAvailabilityFact) -> None:
        db_item.price = fact.price
        db_item.pour_size = fact.pour_size
        db_item.available = fact.available
        db_item.notes = fact.notes
        db_item.source_type = fact.source_type.value
        db_item.confidence = fact.confidence
        db_item.is_stale = fact.is_stale
        db_item.source_job_id = fact.source_job_id
        db_item.last_verified_at = fact.last_verified_at

    def _to_domain(self, db_item: BarWhiskeyDB) -> BarAvailabilityFact:
        return BarAvailabilityFact(
            bar_id=UUID(db_item.bar_id),
            whiskey_id=UUID(db_item.whiskey_id),
            price=db_item.price,
            pour_size=db_item.pour_size,
            available=db_item.available,
            notes=db_item.notes,
            source_type=SourceType(db_item.source_type),
            confidence=db_item.confidence,
            is_stale=db_item.is_stale,
            source_job_id=db_item.source_job_id,
            first_seen_at=db_item.first_seen_at,
            last_verified_at=db_item.last_verified_at,
        )
