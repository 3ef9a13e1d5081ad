"""Database initialization and persistence layer."""

from whiskey_agent.db.engine import (
    create_db_engine,
    get_database_url,
    get_engine,
    get_session,
    init_db,
    reset_engine,
    run_migrations,
)
from whiskey_agent.db.models import (
    Base,
    BarDB,
    BarWhiskeyDB,
    WhiskeyDB,
)
from whiskey_agent.db.repositories import (
    BarRepository,
    BarWhiskeyRepository,
    WhiskeyRepository,
)

__all__ = [
    # Engine
    "create_db_engine",
    "get_database_url",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "run_migrations",
    # Models
    "Base",
    "BarDB",
    "WhiskeyDB",
    "BarWhiskeyDB",
    # Repositories
    "BarRepository",
    "WhiskeyRepository",
    "BarWhiskeyRepository",
]
