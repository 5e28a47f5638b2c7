"""
Incremental upsert of one species.

Reads whatever is already stored for the species, reuses every enrichment
field that is already present, fetches only the missing ones and writes the
assembled record back with merge semantics.  Once a field has a non-empty
stored value it is never fetched again.
"""

from __future__ import annotations

from typing import Any

from species_ingest.datasources.inaturalist import MAX_IMAGES, collect_images, fetch_seasonality
from species_ingest.datasources.wikipedia import fetch_summary_html
from species_ingest.schemas import ProcessOutcome, SpeciesSummary, StoredRecord
from species_ingest.services.http import RetryingFetcher
from species_ingest.store import DocumentStore


def _stored(existing: dict[str, Any] | None, field: str) -> Any:
    """Return the stored value for ``field`` if it counts as already fetched."""
    if existing is None:
        return None
    value = existing.get(field)
    if field == "images" and not isinstance(value, list):
        return None
    # Empty values count as missing: an empty histogram is fetched again.
    return value or None


class SpeciesPipeline:
    """Enrich and persist species one at a time."""

    def __init__(
        self,
        store: DocumentStore,
        fetcher: RetryingFetcher | None = None,
        *,
        max_images: int = MAX_IMAGES,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.max_images = max_images

    def process(self, species: SpeciesSummary, category: str) -> ProcessOutcome:
        """Upsert one species; returns what happened.

        Fetch errors propagate to the caller.
        """
        name = species.scientific_name
        doc_id = str(species.id)
        print(f"Processing {name} (ID: {doc_id})")

        existing = self.store.get(doc_id)
        if species.default_photo_url is None:
            print(f"Warning: no default image for {name}, will use first observation image")
        if not species.vernacular_names:
            print(f"Warning: no common name for {name}")

        images = _stored(existing, "images")
        if images is not None:
            print(f"Reusing {len(images)} stored images for {name}")
        else:
            images = collect_images(species.id, self.max_images, fetcher=self.fetcher)

        if not images:
            print(f"Skipping {name}: no images available")
            return ProcessOutcome.SKIPPED

        seasonality = _stored(existing, "seasonality")
        if seasonality is None:
            seasonality = fetch_seasonality(species.id, fetcher=self.fetcher)

        wikipedia_html = _stored(existing, "wikipediaHtml")
        if wikipedia_html is None:
            wikipedia_html = fetch_summary_html(name, fetcher=self.fetcher) or ""

        record = StoredRecord(
            id=doc_id,
            title=name,
            scientific_name=name,
            image_url=species.default_photo_url or images[0],
            images=images,
            seasonality=seasonality,
            category=category,
            vernacular_names=species.vernacular_names,
            wikipedia_html=wikipedia_html,
        )
        document = record.model_dump(by_alias=True)
        if existing is not None:
            # notes belong to the editor; leaving the key out keeps them on merge
            del document["notes"]

        self.store.set(doc_id, document, merge=True)
        outcome = ProcessOutcome.CREATED if existing is None else ProcessOutcome.UPDATED
        print(f"Saved {name} ({outcome})")
        return outcome
