"""Canonical Pydantic v2 models for the whiskey catalog.

These models define the catalog entities and the records the resolver
and orchestrator exchange with the catalog store:
- CanonicalWhiskey (the catalog identity)
- WhiskeyDraft (creation payload for a new identity)
- Bar, BarAvailabilityFact (per-bar availability)
"""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from whiskey_agent.core.enums import SourceType, WhiskeyType


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


# ============================================================================
# Catalog Entities
# ============================================================================


class CanonicalWhiskey(BaseModel):
    """
    Canonical whiskey entity.

    ``display_name`` keeps the casing of the first sighting and is never
    renamed. ``canonical_key`` is unique across the catalog.
    """

    id: UUID = Field(default_factory=uuid4)
    display_name: str
    canonical_key: str
    distillery: str | None = None
    whiskey_type: WhiskeyType = WhiskeyType.OTHER
    age: int | None = None
    abv: float | None = None
    description: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    @field_validator("display_name", "canonical_key")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name fields cannot be empty")
        return v.strip()


class WhiskeyDraft(BaseModel):
    """Creation payload emitted by the resolver when nothing matched."""

    display_name: str
    canonical_key: str
    distillery: str | None = None
    whiskey_type: WhiskeyType = WhiskeyType.OTHER
    age: int | None = None
    abv: float | None = None
    description: str | None = None
    pick_info: str | None = None

    def to_whiskey(self) -> CanonicalWhiskey:
        """Build the catalog entity this draft describes."""
        return CanonicalWhiskey(
            display_name=self.display_name,
            canonical_key=self.canonical_key,
            distillery=self.distillery,
            whiskey_type=self.whiskey_type,
            age=self.age,
            abv=self.abv,
            description=self.description,
        )


# ============================================================================
# Availability
# ============================================================================


class Bar(BaseModel):
    """A venue that pours whiskey."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    city: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class BarAvailabilityFact(BaseModel):
    """
    Association between a bar and a canonical whiskey.

    One fact per (bar_id, whiskey_id). ``confidence`` is carried through
    unchanged from the producing stage.
    """

    bar_id: UUID
    whiskey_id: UUID
    price: float | None = None
    pour_size: str | None = None
    available: bool = True
    notes: str | None = None
    source_type: SourceType = SourceType.MANUAL
    confidence: Annotated[float, Field(ge=0.0, le=1.0)] = 1.0
    is_stale: bool = False
    source_job_id: str | None = None
    first_seen_at: datetime = Field(default_factory=_utc_now)
    last_verified_at: datetime = Field(default_factory=_utc_now)
