"""Month-of-year observation histogram for one species."""

from __future__ import annotations

from typing import Any

from species_ingest.datasources.inaturalist import client
from species_ingest.services.http import RetryingFetcher, default_fetcher


def fetch_seasonality(species_id: int, *, fetcher: RetryingFetcher | None = None) -> Any:
    """GET /observations/histogram and return ``results`` untouched."""
    fetcher = default_fetcher(fetcher)
    data = fetcher.get_json(
        client.HISTOGRAM_URL,
        params={"taxon_id": species_id, "interval": "month_of_year"},
    )
    return data.get("results") or []
