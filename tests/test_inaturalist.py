"""
Tests for the iNaturalist data source: listing, photos and seasonality.
"""

from __future__ import annotations

import math
from typing import Any

import pytest
from fakes import RoutedSession, make_response

from species_ingest.datasources.inaturalist import (
    collect_images,
    fetch_seasonality,
    list_species,
    medium_photo_url,
)
from species_ingest.datasources.inaturalist import client
from species_ingest.services.http import FetchError, RetryingFetcher

# =============================================================================
# Fixtures / Sample API Responses
# =============================================================================


def _taxon(taxon_id: int, rank: str = "species", **extra: Any) -> dict[str, Any]:
    return {
        "id": taxon_id,
        "name": f"Genus species{taxon_id}",
        "rank": rank,
        "preferred_common_name": f"Frog {taxon_id}",
        "default_photo": {"medium_url": f"https://static.inat.org/photos/{taxon_id}/medium.jpg"},
        **extra,
    }


def _paged_taxa(total: int) -> Any:
    """Route handler serving ``total`` species over 100-item pages."""

    def handler(params: dict[str, Any]) -> Any:
        page = params["page"]
        start = (page - 1) * client.TAXA_PER_PAGE
        ids = range(start, min(start + client.TAXA_PER_PAGE, total))
        return make_response({"results": [_taxon(i + 1) for i in ids]})

    return handler


def _photo(n: int) -> dict[str, Any]:
    return {"url": f"https://static.inat.org/photos/{n}/square.jpg"}


def _observation(photos: list[dict[str, Any]], default: str | None = None) -> dict[str, Any]:
    taxon = {"default_photo": {"medium_url": default}} if default else {}
    return {"photos": photos, "taxon": taxon}


# =============================================================================
# Species listing
# =============================================================================


class TestListSpecies:
    """Pagination, filtering and parsing of ``/taxa``."""

    def test_query_params(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        routed_session.routes[client.TAXA_URL] = make_response({"results": [_taxon(1)]})

        list_species(20979, "Amphibia", fetcher=fetcher)

        url, params = routed_session.calls[0]
        assert url == "https://api.inaturalist.org/v1/taxa"
        assert params == {
            "taxon_id": 20979,
            "rank": "species",
            "is_active": "true",
            "iconic_taxa": "Amphibia",
            "per_page": 100,
            "page": 1,
        }

    @pytest.mark.parametrize("total", [0, 1, 99, 100, 101, 250, 300])
    def test_fetch_call_bound(
        self, total: int, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        routed_session.routes[client.TAXA_URL] = _paged_taxa(total)

        species = list_species(1, "Amphibia", fetcher=fetcher)

        assert len(species) == total
        assert len(routed_session.calls) <= math.ceil(total / 100) + 1
        pages = [params["page"] for _, params in routed_session.calls]
        assert pages == list(range(1, len(pages) + 1))

    def test_short_page_ends_listing(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        routed_session.routes[client.TAXA_URL] = _paged_taxa(150)
        list_species(1, "Amphibia", fetcher=fetcher)
        assert len(routed_session.calls) == 2

    def test_delay_between_pages_only(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher, sleeps: list[float]
    ) -> None:
        routed_session.routes[client.TAXA_URL] = _paged_taxa(250)

        list_species(1, "Amphibia", fetcher=fetcher, page_delay=0.3)

        assert sleeps == [0.3, 0.3]

    def test_filters_non_species(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        routed_session.routes[client.TAXA_URL] = make_response(
            {"results": [_taxon(1), _taxon(2, rank="genus"), _taxon(3, rank="subspecies")]}
        )

        species = list_species(1, "Amphibia", fetcher=fetcher)

        assert [s.id for s in species] == [1]

    def test_filtered_entries_still_count_towards_page_size(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        full_page = [_taxon(i, rank="genus" if i % 2 else "species") for i in range(100)]

        def handler(params: dict[str, Any]) -> Any:
            return make_response({"results": full_page if params["page"] == 1 else []})

        routed_session.routes[client.TAXA_URL] = handler

        species = list_species(1, "Amphibia", fetcher=fetcher)

        assert len(species) == 50
        assert len(routed_session.calls) == 2

    def test_parses_summary(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        routed_session.routes[client.TAXA_URL] = make_response(
            {
                "results": [
                    {
                        "id": 65979,
                        "name": "Lithobates catesbeianus",
                        "rank": "species",
                        "preferred_common_name": "American Bullfrog",
                        "default_photo": {"medium_url": "https://static.inat.org/p/1/medium.jpg"},
                    },
                    {"id": 7, "name": "Nameless commonless", "rank": "species"},
                ]
            }
        )

        first, second = list_species(20979, "Amphibia", fetcher=fetcher)

        assert first.id == 65979
        assert first.scientific_name == "Lithobates catesbeianus"
        assert first.preferred_common_name == "American Bullfrog"
        assert first.default_photo_url == "https://static.inat.org/p/1/medium.jpg"
        assert second.preferred_common_name is None
        assert second.default_photo_url is None
        assert second.vernacular_names == []

    def test_malformed_entries_dropped(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        routed_session.routes[client.TAXA_URL] = make_response(
            {
                "results": [
                    _taxon(1),
                    {"id": None, "name": "Hyla arborea", "rank": "species"},
                    {"id": "2", "name": "Bufo bufo", "rank": "species"},
                    {"id": True, "name": "Bufo spinosus", "rank": "species"},
                    {"id": 3, "name": None, "rank": "species"},
                    {"id": 4, "name": "Rana arvalis", "rank": "species", "preferred_common_name": 7},
                    {"id": 5, "name": "Rana dalmatina", "rank": "species", "default_photo": "x"},
                    "not a taxon",
                ]
            }
        )

        species = list_species(1, "Amphibia", fetcher=fetcher)

        assert [s.id for s in species] == [1, 5]
        assert species[1].default_photo_url is None

    def test_missing_results_key(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        routed_session.routes[client.TAXA_URL] = make_response({})
        assert list_species(1, "Amphibia", fetcher=fetcher) == []

    def test_listing_error_propagates(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        routed_session.routes[client.TAXA_URL] = make_response(status=500)
        with pytest.raises(FetchError):
            list_species(1, "Amphibia", fetcher=fetcher)


# =============================================================================
# Observation images
# =============================================================================


class TestMediumPhotoUrl:
    """Square thumbnails are swapped for the medium variant."""

    def test_square_replaced(self) -> None:
        assert (
            medium_photo_url("https://static.inat.org/photos/1/square.jpg")
            == "https://static.inat.org/photos/1/medium.jpg"
        )

    def test_other_url_unchanged(self) -> None:
        url = "https://static.inat.org/photos/1/large.jpg"
        assert medium_photo_url(url) == url


class TestCollectImages:
    """Image URL extraction from recent observations."""

    def _serve(self, routed_session: RoutedSession, observations: list[dict[str, Any]]) -> None:
        routed_session.routes[client.OBSERVATIONS_URL] = make_response({"results": observations})

    def test_query_params(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        self._serve(routed_session, [])

        collect_images(42, fetcher=fetcher)

        url, params = routed_session.calls[0]
        assert url == "https://api.inaturalist.org/v1/observations"
        assert params == {
            "taxon_id": 42,
            "per_page": 30,
            "photos": "true",
            "order": "desc",
            "order_by": "created_at",
        }

    def test_thumbnails_become_medium(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        self._serve(routed_session, [_observation([_photo(1), _photo(2)])])

        images = collect_images(42, fetcher=fetcher)

        assert images == [
            "https://static.inat.org/photos/1/medium.jpg",
            "https://static.inat.org/photos/2/medium.jpg",
        ]
        assert all("square" not in url for url in images)

    def test_capped_and_unique(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        observations = [_observation([_photo(n), _photo(n + 1)]) for n in range(0, 20, 1)]
        self._serve(routed_session, observations)

        images = collect_images(42, max_images=5, fetcher=fetcher)

        assert len(images) == 5
        assert len(set(images)) == 5

    def test_duplicates_skipped(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        self._serve(
            routed_session,
            [_observation([_photo(1), _photo(1)]), _observation([_photo(1), _photo(2)])],
        )

        images = collect_images(42, fetcher=fetcher)

        assert images == [
            "https://static.inat.org/photos/1/medium.jpg",
            "https://static.inat.org/photos/2/medium.jpg",
        ]

    def test_taxon_default_photo_fallback(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        default = "https://static.inat.org/photos/999/medium.jpg"
        self._serve(
            routed_session,
            [_observation([_photo(1)], default=default), _observation([_photo(2)], default=default)],
        )

        images = collect_images(42, fetcher=fetcher)

        # fallback comes right after the first observation's photos, and only once
        assert images == [
            "https://static.inat.org/photos/1/medium.jpg",
            default,
            "https://static.inat.org/photos/2/medium.jpg",
        ]

    def test_fallback_not_added_when_full(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        default = "https://static.inat.org/photos/999/medium.jpg"
        self._serve(routed_session, [_observation([_photo(1), _photo(2)], default=default)])

        images = collect_images(42, max_images=2, fetcher=fetcher)

        assert default not in images

    def test_earlier_observations_win(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        self._serve(
            routed_session,
            [_observation([_photo(n) for n in range(1, 5)]), _observation([_photo(n) for n in range(5, 9)])],
        )

        images = collect_images(42, max_images=5, fetcher=fetcher)

        assert images[:4] == [f"https://static.inat.org/photos/{n}/medium.jpg" for n in range(1, 5)]
        assert images[4] == "https://static.inat.org/photos/5/medium.jpg"

    def test_photo_without_url_ignored(
        self, routed_session: RoutedSession, fetcher: RetryingFetcher
    ) -> None:
        self._serve(routed_session, [_observation([{"url": None}, {}, _photo(3)])])
        assert collect_images(42, fetcher=fetcher) == ["https://static.inat.org/photos/3/medium.jpg"]

    def test_no_observations(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        self._serve(routed_session, [])
        assert collect_images(42, fetcher=fetcher) == []


# =============================================================================
# Seasonality
# =============================================================================


class TestFetchSeasonality:
    """The histogram payload is passed through untouched."""

    def test_returns_results(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        histogram = {"month_of_year": {"1": 3, "2": 0, "6": 41}}
        routed_session.routes[client.HISTOGRAM_URL] = make_response({"results": histogram})

        assert fetch_seasonality(42, fetcher=fetcher) == histogram

        url, params = routed_session.calls[0]
        assert url == "https://api.inaturalist.org/v1/observations/histogram"
        assert params == {"taxon_id": 42, "interval": "month_of_year"}

    def test_missing_results(self, routed_session: RoutedSession, fetcher: RetryingFetcher) -> None:
        routed_session.routes[client.HISTOGRAM_URL] = make_response({})
        assert fetch_seasonality(42, fetcher=fetcher) == []
