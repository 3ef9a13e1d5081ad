"""SQLAlchemy ORM models for the whiskey catalog.

These models define the database tables:
- BarDB (venues)
- WhiskeyDB (canonical whiskeys, unique by canonical key)
- BarWhiskeyDB (availability facts, unique per bar and whiskey)
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def _generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class BarDB(Base):
    """Database model for bars."""

    __tablename__ = "bars"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    whiskeys: Mapped[list["BarWhiskeyDB"]] = relationship(
        "BarWhiskeyDB", back_populates="bar", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<BarDB(id={self.id}, name='{self.name}')>"


class WhiskeyDB(Base):
    """
    Database model for canonical whiskeys.

    ``canonical_key`` is unique; concurrent inserts of the same key fail
    with an IntegrityError that the catalog turns into a conflict.
    """

    __tablename__ = "whiskeys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    canonical_key: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    distillery: Mapped[str | None] = mapped_column(String(255), nullable=True)
    whiskey_type: Mapped[str] = mapped_column(String(20), default="other")
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    abv: Mapped[float | None] = mapped_column(Float, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, onupdate=_utc_now)

    # Relationships
    bars: Mapped[list["BarWhiskeyDB"]] = relationship("BarWhiskeyDB", back_populates="whiskey")

    def __repr__(self) -> str:
        return f"<WhiskeyDB(id={self.id}, key='{self.canonical_key}')>"


class BarWhiskeyDB(Base):
    """Database model for bar availability facts."""

    __tablename__ = "bar_whiskeys"
    __table_args__ = (UniqueConstraint("bar_id", "whiskey_id", name="uq_bar_whiskeys_pair"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    bar_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("bars.id"), nullable=False, index=True
    )
    whiskey_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("whiskeys.id"), nullable=False, index=True
    )
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    pour_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    available: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_type: Mapped[str] = mapped_column(String(20), default="manual")
    confidence: Mapped[float] = mapped_column(Float, default=1.0)
    is_stale: Mapped[bool] = mapped_column(Boolean, default=False)
    source_job_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    first_seen_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    last_verified_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    bar: Mapped["BarDB"] = relationship("BarDB", back_populates="whiskeys")
    whiskey: Mapped["WhiskeyDB"] = relationship("WhiskeyDB", back_populates="bars")

    def __repr__(self) -> str:
        return f"<BarWhiskeyDB(bar_id={self.bar_id}, whiskey_id={self.whiskey_id})>"
