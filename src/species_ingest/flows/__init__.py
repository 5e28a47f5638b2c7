"""
Prefect flows for the ingest pipeline.

Flows:
- sync: pick one taxonomic group, list its species, enrich and upsert each

Usage (local):
    python -m species_ingest.flows.sync

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'sync-random-taxon/default'
"""
