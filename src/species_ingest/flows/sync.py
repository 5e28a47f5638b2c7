"""
Prefect flow that syncs one randomly chosen taxonomic group.

Each run picks one group, lists its species, shuffles them and upserts them
one at a time.  A species that fails is logged and counted; the run moves on.

Run locally:
    python -m species_ingest.flows.sync

Run with Prefect dashboard:
    prefect server start &
    python -m species_ingest.flows.sync
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any, TypeVar

from prefect import flow

from species_ingest.config import get_settings
from species_ingest.datasources.inaturalist import MAX_IMAGES, list_species
from species_ingest.datasources.inaturalist.client import PAGE_DELAY
from species_ingest.pipeline import SpeciesPipeline
from species_ingest.reference import TAXON_GROUPS
from species_ingest.schemas import ProcessOutcome, TaxonGroup
from species_ingest.services.http import RetryingFetcher, create_fetcher
from species_ingest.store import DocumentStore, JsonDocumentStore

T = TypeVar("T")


def choose_taxon(
    rng: random.Random,
    taxa: Sequence[TaxonGroup] = TAXON_GROUPS,
    category: str | None = None,
) -> TaxonGroup:
    """Pick a group uniformly at random, or the one matching ``category``."""
    if category is None:
        return rng.choice(taxa)
    for taxon in taxa:
        if taxon.category.lower() == category.lower():
            return taxon
    known = ", ".join(t.category for t in taxa)
    msg = f"Unknown category {category!r} (expected one of: {known})"
    raise ValueError(msg)


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly random permutation of ``items``."""
    order = list(items)
    rng.shuffle(order)
    return order


def run_taxon(
    store: DocumentStore,
    *,
    rng: random.Random,
    fetcher: RetryingFetcher | None = None,
    taxa: Sequence[TaxonGroup] = TAXON_GROUPS,
    category: str | None = None,
    max_images: int = MAX_IMAGES,
    page_delay: float = PAGE_DELAY,
) -> dict[str, Any]:
    """
    Sync every species of one taxonomic group into ``store``.

    Listing failures propagate; per-species failures are logged and counted.

    Returns:
        Summary dict with the chosen group and per-outcome counts.
    """
    taxon = choose_taxon(rng, taxa, category)
    print(f"Selected taxon: {taxon.category} (ID: {taxon.taxon_id})")

    species_list = list_species(
        taxon.taxon_id, taxon.iconic_group, fetcher=fetcher, page_delay=page_delay
    )
    pipeline = SpeciesPipeline(store, fetcher, max_images=max_images)

    results: dict[str, Any] = {
        "category": taxon.category,
        "taxon_id": taxon.taxon_id,
        "species": len(species_list),
        **{outcome.value: 0 for outcome in ProcessOutcome},
        "failed": 0,
    }
    for species in shuffled(species_list, rng):
        try:
            outcome = pipeline.process(species, taxon.category)
        except Exception as exc:  # noqa: BLE001
            print(f"Failed processing species {species.scientific_name}: {exc}")
            results["failed"] += 1
            continue
        results[outcome.value] += 1

    print(f"Sync for {taxon.category} complete: {results}")
    return results


@flow(name="sync-random-taxon", log_prints=True)
def sync_random_taxon(seed: int | None = None, category: str | None = None) -> dict[str, Any]:
    """
    Sync one taxonomic group using the configured store and fetcher.

    Args:
        seed: Seed for taxon choice and species order (None = nondeterministic).
        category: Force a specific group instead of a random one.
    """
    settings = get_settings()
    store = JsonDocumentStore(settings.data_dir, settings.collection)
    return run_taxon(
        store,
        rng=random.Random(seed if seed is not None else settings.seed),
        fetcher=create_fetcher(),
        category=category,
        max_images=settings.max_images,
        page_delay=settings.page_delay,
    )


if __name__ == "__main__":
    result = sync_random_taxon()
    print(f"Flow complete: {result}")
