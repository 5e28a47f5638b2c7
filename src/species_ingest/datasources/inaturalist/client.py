"""iNaturalist API client constants.

API docs: https://api.inaturalist.org/v1/docs/
Recommended practices: https://www.inaturalist.org/pages/api+recommended+practices
"""

API_BASE = "https://api.inaturalist.org/v1"
TAXA_URL = f"{API_BASE}/taxa"
OBSERVATIONS_URL = f"{API_BASE}/observations"
HISTOGRAM_URL = f"{API_BASE}/observations/histogram"

SPECIES_RANK = "species"

TAXA_PER_PAGE = 100
OBSERVATIONS_PER_PAGE = 30
PAGE_DELAY = 0.3  # seconds between listing pages, on top of reactive backoff
