"""Tests for database persistence layer and the SQL catalog."""

import tempfile
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import Session, sessionmaker

from whiskey_agent.core.enums import SourceType, WhiskeyType
from whiskey_agent.core.errors import CatalogConflict, CatalogUnavailable
from whiskey_agent.core.schema import ExtractedMenu, RawExtractedEntry
from whiskey_agent.core.schema_canonical import (
    BarAvailabilityFact,
    CanonicalWhiskey,
    WhiskeyDraft,
)
from whiskey_agent.db.engine import (
    create_db_engine,
    get_database_url,
    get_engine,
    get_session,
    init_db,
    reset_engine,
    run_migrations,
)
from whiskey_agent.db.models import Base
from whiskey_agent.db.repositories import (
    BarRepository,
    BarWhiskeyRepository,
    WhiskeyRepository,
)
from whiskey_agent.ingestion.catalog import SqlCatalog
from whiskey_agent.ingestion.orchestrator import ingest_menu


@pytest.fixture
def temp_db_path():
    """Create a temporary database file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def engine(temp_db_path):
    """Create a test database engine with foreign keys enforced."""
    engine = create_db_engine(temp_db_path)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def bar(session: Session):
    """A committed bar row."""
    bar = BarRepository(session).get_or_create("Multnomah Whiskey Library", city="Portland")
    session.commit()
    return bar


def draft(name: str, key: str | None = None, **kwargs) -> WhiskeyDraft:
    return WhiskeyDraft(display_name=name, canonical_key=key or name.lower(), **kwargs)


class TestBarRepository:
    """Tests for BarRepository."""

    def test_get_or_create_is_idempotent(self, session: Session) -> None:
        """Test the same bar name resolves to one row."""
        repo = BarRepository(session)

        first = repo.get_or_create("Multnomah Whiskey Library", city="Portland")
        session.commit()
        second = repo.get_or_create("  multnomah whiskey library ")

        assert second.id == first.id
        assert second.city == "Portland"
        assert len(repo.list_all()) == 1

    def test_get_by_id(self, session: Session, bar) -> None:
        """Test fetching a bar by ID."""
        assert BarRepository(session).get_by_id(bar.id).name == bar.name
        assert BarRepository(session).get_by_id(uuid4()) is None


class TestWhiskeyRepository:
    """Tests for WhiskeyRepository."""

    def test_create_and_get(self, session: Session) -> None:
        """Test creating and reading back a whiskey."""
        repo = WhiskeyRepository(session)
        whiskey = CanonicalWhiskey(
            display_name="Weller 12",
            canonical_key="weller 12",
            whiskey_type=WhiskeyType.BOURBON,
            age=12,
            abv=45.0,
        )

        repo.create(whiskey)
        session.commit()

        fetched = repo.get_by_canonical_key("weller 12")
        assert fetched is not None
        assert fetched.id == whiskey.id
        assert fetched.whiskey_type == WhiskeyType.BOURBON
        assert fetched.age == 12
        assert repo.get_by_id(whiskey.id) == fetched
        assert repo.count() == 1

    def test_scan_prefix_creation_order_and_limit(self, session: Session) -> None:
        """Test prefix scans are ordered by creation time and capped."""
        repo = WhiskeyRepository(session)
        for minute, (name, key) in enumerate(
            [
                ("Weller Special Reserve", "weller special reserve"),
                ("Wild Turkey 101", "wild turkey 101"),
                ("Weller 12", "weller 12"),
                ("Weller Antique 107", "weller antique 107"),
            ]
        ):
            created = datetime(2024, 1, 1, 12, minute)
            repo.create(
                CanonicalWhiskey(
                    display_name=name, canonical_key=key, created_at=created, updated_at=created
                )
            )
        session.commit()

        keys = [w.canonical_key for w in repo.scan_prefix("weller", limit=50)]
        assert keys == ["weller special reserve", "weller 12", "weller antique 107"]
        assert len(repo.scan_prefix("weller", limit=2)) == 2
        assert repo.scan_prefix("macallan") == []

    def test_scan_prefix_escapes_wildcards(self, session: Session) -> None:
        """Test LIKE wildcards in the prefix are matched literally."""
        repo = WhiskeyRepository(session)
        repo.create(CanonicalWhiskey(display_name="Weller 12", canonical_key="weller 12"))
        session.commit()

        assert repo.scan_prefix("w_ller") == []
        assert repo.scan_prefix("%") == []

    def test_fill_missing_missing_whiskey(self, session: Session) -> None:
        """Test filling an unknown whiskey raises ValueError."""
        with pytest.raises(ValueError, match="not found"):
            WhiskeyRepository(session).fill_missing(uuid4(), RawExtractedEntry(name="Weller 12"))


class TestSqlCatalog:
    """Tests for the SQLAlchemy-backed catalog."""

    def test_create_and_lookup(self, session: Session) -> None:
        """Test a created whiskey is visible by key and prefix."""
        catalog = SqlCatalog(session)

        whiskey = catalog.create(draft("Weller 12", description="Pick: Store Pick"))

        assert catalog.get_by_canonical_key("weller 12").id == whiskey.id
        assert [w.id for w in catalog.scan_prefix("weller", 10)] == [whiskey.id]
        assert whiskey.description == "Pick: Store Pick"

    def test_duplicate_key_raises_conflict(self, session: Session) -> None:
        """Test the unique index surfaces as CatalogConflict and the session survives."""
        catalog = SqlCatalog(session)
        original = catalog.create(draft("Weller 12"))

        with pytest.raises(CatalogConflict) as exc_info:
            catalog.create(draft("WELLER 12", key="weller 12"))

        assert exc_info.value.canonical_key == "weller 12"
        assert catalog.get_by_canonical_key("weller 12").id == original.id
        assert WhiskeyRepository(session).count() == 1

    def test_fill_missing(self, session: Session) -> None:
        """Test empty attributes are filled and populated ones kept."""
        catalog = SqlCatalog(session)
        whiskey = catalog.create(draft("Weller 12", abv=45.0))

        updated = catalog.fill_missing(
            whiskey.id,
            RawExtractedEntry(name="Weller 12", type="bourbon", age=12, abv=50.0),
        )

        assert updated.whiskey_type == WhiskeyType.BOURBON
        assert updated.age == 12
        assert updated.abv == 45.0
        assert updated.display_name == "Weller 12"

    def test_fill_missing_unknown_whiskey(self, session: Session) -> None:
        """Test a missing whiskey becomes CatalogUnavailable."""
        with pytest.raises(CatalogUnavailable):
            SqlCatalog(session).fill_missing(uuid4(), RawExtractedEntry(name="Weller 12"))

    def test_upsert_availability(self, session: Session, bar) -> None:
        """Test upserting one pair twice keeps a single row and first_seen_at."""
        catalog = SqlCatalog(session)
        whiskey = catalog.create(draft("Weller 12"))

        catalog.upsert_availability(
            BarAvailabilityFact(bar_id=bar.id, whiskey_id=whiskey.id, price=14.0)
        )
        facts = BarWhiskeyRepository(session)
        first = facts.get(bar.id, whiskey.id)
        assert first is not None
        assert first.price == 14.0

        second = catalog.upsert_availability(
            BarAvailabilityFact(
                bar_id=bar.id,
                whiskey_id=whiskey.id,
                price=16.0,
                source_type=SourceType.VISION,
                confidence=0.6,
            )
        )

        assert facts.count() == 1
        assert second.price == 16.0
        assert second.source_type == SourceType.VISION
        assert second.confidence == 0.6
        assert second.first_seen_at == first.first_seen_at

    def test_upsert_unknown_bar_rejected(self, session: Session) -> None:
        """Test foreign keys are enforced for availability facts."""
        catalog = SqlCatalog(session)
        whiskey = catalog.create(draft("Weller 12"))

        with pytest.raises(CatalogUnavailable):
            catalog.upsert_availability(BarAvailabilityFact(bar_id=uuid4(), whiskey_id=whiskey.id))


class TestIngestionOnSql:
    """End-to-end ingestion against SQLite."""

    def test_ingest_menu(self, session: Session, bar) -> None:
        """Test a menu lands as whiskeys and facts, and re-ingesting is stable."""
        menu = ExtractedMenu(
            whiskeys=[
                {"name": "THE Macallan 12 Year Old", "type": "single malt", "price": 18.0},
                {"name": "Macallan 12 YO", "price": 19.0},
                {"name": "Eagle Rare 10 - Store Pick", "type": "bourbon"},
                {"name": ""},
            ],
            source_type=SourceType.TEXT_SCRAPE,
            confidence=0.9,
        )
        catalog = SqlCatalog(session)

        result = ingest_menu(catalog, bar.id, menu)

        assert result.created == 2
        assert result.updated == 1
        assert result.skipped == 1
        assert WhiskeyRepository(session).count() == 2

        macallan = catalog.get_by_canonical_key("macallan 12 year")
        assert macallan is not None
        assert macallan.display_name == "THE Macallan 12 Year Old"
        assert macallan.whiskey_type == WhiskeyType.SINGLE_MALT

        facts = BarWhiskeyRepository(session).list_for_bar(bar.id)
        assert len(facts) == 2
        assert {f.price for f in facts} == {19.0, None}

        again = ingest_menu(catalog, bar.id, menu)
        assert again.created == 0
        assert again.updated == 3
        assert WhiskeyRepository(session).count() == 2
        assert BarWhiskeyRepository(session).count() == 2


class TestEngine:
    """Tests for engine helpers and migrations."""

    def test_database_url_from_path(self, tmp_path: Path) -> None:
        """Test an explicit path wins and its directory is created."""
        url = get_database_url(tmp_path / "nested" / "catalog.db")

        assert url == f"sqlite:///{tmp_path / 'nested' / 'catalog.db'}"
        assert (tmp_path / "nested").is_dir()

    def test_database_url_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a sqlite DATABASE_URL is used as-is."""
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")

        assert get_database_url() == "sqlite:///:memory:"

    def test_run_migrations(self, tmp_path: Path) -> None:
        """Test migrations create every table and are safe to rerun."""
        db_path = tmp_path / "migrated.db"

        run_migrations(db_path)
        run_migrations(db_path)

        engine = create_db_engine(db_path)
        try:
            inspector = inspect(engine)
            assert {"bars", "whiskeys", "bar_whiskeys", "alembic_version"} <= set(
                inspector.get_table_names()
            )
            indexes = {ix["name"]: ix for ix in inspector.get_indexes("whiskeys")}
            assert indexes["ix_whiskeys_canonical_key"]["unique"]
        finally:
            engine.dispose()

    def test_session_bound_to_shared_engine(self, tmp_path: Path) -> None:
        """Test sessions share one engine until it is reset."""
        db_path = tmp_path / "shared.db"
        reset_engine()
        try:
            init_db(db_path)
            engine = get_engine()

            with get_session() as session:
                assert session.get_bind() is engine
                assert WhiskeyRepository(session).count() == 0

            reset_engine()
            assert get_engine(db_path) is not engine
        finally:
            reset_engine()
