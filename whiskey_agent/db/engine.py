"""SQLite engine, sessions and schema setup for the whiskey catalog."""

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".whiskey_agent" / "whiskey_agent.db"

PROJECT_ROOT = Path(__file__).resolve().parents[2]
MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def get_database_url(db_path: Path | str | None = None) -> str:
    """
    Resolve the catalog database URL.

    An explicit ``db_path`` wins, then DATABASE_URL (a sqlite URL used as-is,
    or a bare file path), then ~/.whiskey_agent/whiskey_agent.db. The parent
    directory of a file path is created.
    """
    if db_path is not None:
        path = Path(db_path).expanduser()
    elif os.environ.get("DATABASE_URL"):
        url = os.environ["DATABASE_URL"]
        if url.startswith("sqlite"):
            return url
        path = Path(url).expanduser()
    else:
        path = DEFAULT_DB_PATH

    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # Off by default in SQLite; facts must not outlive their bar or whiskey
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_db_engine(db_path: Path | str | None = None, echo: bool = False) -> Engine:
    """Create a SQLite engine with foreign key enforcement on every connection."""
    engine = create_engine(
        get_database_url(db_path),
        echo=echo,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


_engine: Engine | None = None


def get_engine(db_path: Path | str | None = None) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = create_db_engine(db_path)
    return _engine


def reset_engine() -> None:
    """Dispose of the process-wide engine (useful for testing)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def get_session(db_path: Path | str | None = None) -> Session:
    """
    Open a session on the process-wide engine.

    Usage:
        with get_session() as session:
            catalog = SqlCatalog(session)
    """
    return Session(get_engine(db_path), autoflush=False)


def init_db(db_path: Path | str | None = None) -> None:
    """Create any missing tables directly from the ORM models."""
    from whiskey_agent.db.models import Base

    Base.metadata.create_all(bind=get_engine(db_path))


def run_migrations(db_path: Path | str | None = None) -> None:
    """
    Upgrade the database to the latest Alembic revision.

    Safe to call repeatedly; Alembic tracks applied revisions.
    """
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"Alembic config not found: {alembic_ini}")

    url = get_database_url(db_path)
    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", url)

    try:
        command.upgrade(config, "head")
    except Exception as e:
        logger.error(f"Migration failed for {url}: {e}")
        raise
