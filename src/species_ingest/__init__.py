"""Species Ingest - enriched amphibian and reptile records from iNaturalist.

Architecture::

    datasources/   External APIs (iNaturalist taxa/observations/histogram, Wikipedia)
    services/      Shared HTTP client (error classification, retry with backoff)
    pipeline.py    Per-species incremental upsert (reuse stored fields, fetch the rest)
    store.py       Keyed document store with merge-on-write
    flows/         Prefect orchestration (one random taxon per run)
    trigger.py     HTTP endpoint: 202 now, sync in the background

Data flow: trigger/cli → flows.sync → datasources.inaturalist (listing)
→ shuffle → pipeline (images, seasonality, wikipedia) → store
"""

__version__ = "0.1.0"

from species_ingest.config import Settings, get_settings

__all__ = ["Settings", "__version__", "get_settings"]
