"""iNaturalist species data source.

Lists the species under a parent taxon and enriches a single species with
observation photos and a month-of-year histogram.

Public API:
  - client: API URLs, page sizes
  - species: list_species
  - observations: collect_images, medium_photo_url
  - seasonality: fetch_seasonality
"""

from species_ingest.datasources.inaturalist.client import API_BASE
from species_ingest.datasources.inaturalist.observations import (
    MAX_IMAGES,
    collect_images,
    medium_photo_url,
)
from species_ingest.datasources.inaturalist.seasonality import fetch_seasonality
from species_ingest.datasources.inaturalist.species import list_species

__all__ = [
    "API_BASE",
    "MAX_IMAGES",
    "collect_images",
    "fetch_seasonality",
    "list_species",
    "medium_photo_url",
]
