"""Species listing: walks the paged ``/taxa`` endpoint for one parent taxon."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from species_ingest.datasources.inaturalist import client
from species_ingest.schemas import SpeciesSummary
from species_ingest.services.http import RetryingFetcher, default_fetcher


def _is_species(taxon: Any) -> bool:
    if not isinstance(taxon, dict) or taxon.get("rank") != client.SPECIES_RANK:
        return False
    taxon_id, name = taxon.get("id"), taxon.get("name")
    return (
        isinstance(taxon_id, int)
        and not isinstance(taxon_id, bool)
        and isinstance(name, str)
        and bool(name)
    )


def _parse_page(results: list[Any]) -> list[SpeciesSummary]:
    """Parse the species on one page; malformed entries are dropped."""
    species: list[SpeciesSummary] = []
    for taxon in results:
        if not _is_species(taxon):
            continue
        try:
            species.append(SpeciesSummary.from_api(taxon))
        except ValidationError as exc:
            print(f"Dropping malformed taxon {taxon.get('id')}: {exc.error_count()} errors")
    return species


def list_species(
    taxon_id: int,
    iconic_group: str,
    *,
    fetcher: RetryingFetcher | None = None,
    page_delay: float = client.PAGE_DELAY,
) -> list[SpeciesSummary]:
    """
    Fetch every active species under a parent taxon.

    Pages through ``/taxa`` 100 at a time from page 1 and stops at the first
    short page.  Results are filtered to ``rank == "species"`` even though the
    query already asks for that rank.

    Args:
        taxon_id: Parent taxon (e.g. 20979 for frogs).
        iconic_group: iNaturalist iconic taxon, e.g. ``"Amphibia"``.
        fetcher: Fetcher to use (defaults to the shared one).
        page_delay: Pause between pages, in seconds.

    Returns:
        List of SpeciesSummary in listing order.
    """
    fetcher = default_fetcher(fetcher)
    species: list[SpeciesSummary] = []
    page = 1

    while True:
        print(f"Fetching page {page} for taxon {taxon_id} ({iconic_group})")
        data = fetcher.get_json(
            client.TAXA_URL,
            params={
                "taxon_id": taxon_id,
                "rank": client.SPECIES_RANK,
                "is_active": "true",
                "iconic_taxa": iconic_group,
                "per_page": client.TAXA_PER_PAGE,
                "page": page,
            },
        )
        results: list[dict[str, Any]] = data.get("results") or []
        species.extend(_parse_page(results))

        if len(results) < client.TAXA_PER_PAGE:
            break

        page += 1
        fetcher.sleep(page_delay)

    print(f"Fetched {len(species)} species for taxon {taxon_id}")
    return species
