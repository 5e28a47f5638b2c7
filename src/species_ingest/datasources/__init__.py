"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Fetch functions take an optional ``fetcher`` keyword and fall back to the
shared ``services.http.fetcher``::

    from species_ingest.services.http import RetryingFetcher, default_fetcher

    def fetch_something(key, *, fetcher: RetryingFetcher | None = None) -> dict[str, Any]:
        return default_fetcher(fetcher).get_json(API_URL, params={...})

Sources:
  - inaturalist/  species listing, observation photos, seasonality histogram
  - wikipedia/    mobile HTML page per scientific name
"""
