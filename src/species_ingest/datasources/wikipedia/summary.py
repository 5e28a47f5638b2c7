"""Mobile-HTML page content for a species, looked up by scientific name."""

from __future__ import annotations

from urllib.parse import quote

from species_ingest.datasources.wikipedia.client import MOBILE_HTML_URL, TITLE_SAFE_CHARS
from species_ingest.services.http import (
    RetriesExhaustedError,
    RetryingFetcher,
    UpstreamError,
    default_fetcher,
)


def page_title(scientific_name: str) -> str:
    """``"Rana temporaria"`` -> ``"Rana_temporaria"`` (percent-encoded)."""
    return quote(scientific_name.replace(" ", "_"), safe=TITLE_SAFE_CHARS)


def fetch_summary_html(
    scientific_name: str,
    *,
    fetcher: RetryingFetcher | None = None,
) -> str | None:
    """
    Fetch the Wikipedia mobile HTML page for a species.

    A missing page is expected for many species, so every fetch failure
    (404, exhausted retries, ...) is reported as ``None`` instead of raised.
    """
    fetcher = default_fetcher(fetcher)
    url = f"{MOBILE_HTML_URL}/{page_title(scientific_name)}"
    print(f"Fetching Wikipedia page for {scientific_name}")
    try:
        return fetcher.get_text(url)
    except RetriesExhaustedError as exc:
        print(f"Wikipedia unavailable for {scientific_name!r}: {exc}")
    except UpstreamError:
        print(f"No Wikipedia page found for {scientific_name!r}")
    return None
