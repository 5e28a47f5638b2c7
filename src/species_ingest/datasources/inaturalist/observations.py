"""Observation photos: a short, deduplicated list of image URLs per species."""

from __future__ import annotations

from typing import Any

from species_ingest.datasources.inaturalist import client
from species_ingest.services.http import RetryingFetcher, default_fetcher

MAX_IMAGES = 5


def medium_photo_url(url: str) -> str:
    """Swap the square thumbnail variant for the medium one."""
    return url.replace("square", "medium", 1) if "square" in url else url


def _taxon_photo_url(obs: dict[str, Any]) -> str | None:
    taxon = obs.get("taxon") or {}
    photo = taxon.get("default_photo") or {}
    url: str | None = photo.get("medium_url")
    return url or None


def collect_images(
    species_id: int,
    max_images: int = MAX_IMAGES,
    *,
    fetcher: RetryingFetcher | None = None,
) -> list[str]:
    """
    Collect up to ``max_images`` unique photo URLs for a species.

    Scans the 30 most recently created photographed observations in order.
    Each observation contributes its photos (medium variant) first, then its
    taxon's default photo if there is still room.

    Returns:
        Unique URLs in first-seen order, at most ``max_images`` long.
    """
    fetcher = default_fetcher(fetcher)
    data = fetcher.get_json(
        client.OBSERVATIONS_URL,
        params={
            "taxon_id": species_id,
            "per_page": client.OBSERVATIONS_PER_PAGE,
            "photos": "true",
            "order": "desc",
            "order_by": "created_at",
        },
    )
    observations: list[dict[str, Any]] = data.get("results") or []
    print(f"{len(observations)} observations found for species {species_id}")

    images: list[str] = []
    for obs in observations:
        for photo in obs.get("photos") or []:
            if len(images) >= max_images:
                break
            url = medium_photo_url(photo.get("url") or "")
            if url and url not in images:
                images.append(url)

        fallback = _taxon_photo_url(obs)
        if len(images) < max_images and fallback and fallback not in images:
            images.append(fallback)

        if len(images) >= max_images:
            break

    print(f"Collected {len(images)} images for species {species_id}")
    return images
