"""Pydantic v2 models for the extraction boundary.

These models validate what upstream producers (HTML scrapes, menu photo
transcriptions, review mining) hand to the ingestion pipeline:
- RawExtractedEntry (one whiskey line from a menu)
- ExtractedMenu (a batch of entries plus provenance)
- JudgeVerdict (the dedup judge's answer)
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from whiskey_agent.core.enums import SourceType, WhiskeyType


class RawExtractedEntry(BaseModel):
    """
    A single whiskey as the extraction step saw it.

    Immutable once validated. An empty ``name`` passes validation so the
    orchestrator can count it as a skipped entry instead of failing the menu.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    distillery: str | None = None
    whiskey_type: WhiskeyType | None = Field(default=None, alias="type")
    age: int | None = None
    abv: float | None = None
    price: float | None = None
    pour_size: str | None = None
    notes: str | None = None

    @field_validator("whiskey_type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        """Map unknown category labels to ``other`` rather than rejecting the entry."""
        if v is None or isinstance(v, WhiskeyType):
            return v
        label = str(v).strip().lower().replace(" ", "_").replace("-", "_")
        if not label:
            return None
        try:
            return WhiskeyType(label)
        except ValueError:
            return WhiskeyType.OTHER

    @field_validator("age")
    @classmethod
    def age_not_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("age cannot be negative")
        return v

    @field_validator("abv")
    @classmethod
    def abv_in_range(cls, v: float | None) -> float | None:
        if v is not None and not 0 < v <= 100:
            raise ValueError("abv must be a percentage between 0 and 100")
        return v

    @field_validator("distillery", "pour_size", "notes")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ExtractedMenu(BaseModel):
    """
    A batch of extracted entries for one bar, with provenance.

    ``whiskeys`` holds the raw payloads; each one is validated individually
    by the orchestrator so a single malformed line does not sink the batch.
    """

    bar_name: str | None = None
    whiskeys: list[Any] = Field(default_factory=list)
    source_type: SourceType = SourceType.TEXT_SCRAPE
    confidence: Annotated[float, Field(ge=0.0, le=1.0)] = 0.8
    source_url: str | None = None
    source_date: str | None = None
    scraped_at: datetime | None = None
    source_attribution: str | None = None
    content_hash: str | None = None

    @field_validator("whiskeys", mode="before")
    @classmethod
    def entries_as_dicts(cls, v: Any) -> Any:
        """Accept already-built RawExtractedEntry objects alongside plain dicts."""
        if not isinstance(v, list):
            return v
        return [
            item.model_dump(by_alias=True, exclude_none=True)
            if isinstance(item, RawExtractedEntry)
            else item
            for item in v
        ]


class JudgeVerdict(BaseModel):
    """Same-product verdict returned by the dedup judge."""

    model_config = ConfigDict(populate_by_name=True)

    same_product: bool = Field(
        validation_alias=AliasChoices("same_whiskey", "sameProduct", "same_product")
    )
    confidence: Annotated[float, Field(ge=0.0, le=1.0)]
    reasoning: str = ""
