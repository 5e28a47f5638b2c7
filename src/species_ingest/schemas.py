"""
Domain models for species ingest.

Pydantic models for data from external APIs and for persisted documents.
These define the canonical schema - datasources normalize API responses to these.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Taxonomy
# =============================================================================


class TaxonGroup(BaseModel):
    """A taxonomic group a run can be scoped to."""

    model_config = ConfigDict(frozen=True)

    taxon_id: int = Field(..., description="iNaturalist taxon ID of the parent taxon")
    category: str = Field(..., description="Category label written to each record")
    iconic_group: str = Field(..., description="iNaturalist iconic taxon name")


class SpeciesSummary(BaseModel):
    """A species as returned by the taxa listing."""

    id: int
    scientific_name: str
    preferred_common_name: str | None = None
    default_photo_url: str | None = None

    @classmethod
    def from_api(cls, taxon: dict[str, Any]) -> SpeciesSummary:
        """Parse a single ``/taxa`` result."""
        photo = taxon.get("default_photo")
        if not isinstance(photo, dict):
            photo = {}
        return cls(
            id=taxon["id"],
            scientific_name=taxon["name"],
            preferred_common_name=taxon.get("preferred_common_name") or None,
            default_photo_url=photo.get("medium_url") or None,
        )

    @property
    def vernacular_names(self) -> list[str]:
        return [self.preferred_common_name] if self.preferred_common_name else []


# =============================================================================
# Persisted documents
# =============================================================================


class StoredRecord(BaseModel):
    """One species document, keyed by the stringified iNaturalist ID.

    Serialize with ``model_dump(by_alias=True)`` to get the stored key names.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    scientific_name: str = Field(..., alias="scientificName")
    image_url: str = Field(..., alias="imageURL")
    images: list[str] = Field(..., min_length=1)
    seasonality: Any = None
    category: str
    notes: str = ""
    vernacular_names: list[str] = Field(default_factory=list)
    wikipedia_html: str = Field(default="", alias="wikipediaHtml")


class ProcessOutcome(StrEnum):
    """What happened to one species during a run."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
