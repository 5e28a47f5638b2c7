"""Wikipedia encyclopedia content.

Public API:
  - summary: fetch_summary_html, page_title
  - client: REST API URLs
"""

from species_ingest.datasources.wikipedia.client import MOBILE_HTML_URL
from species_ingest.datasources.wikipedia.summary import fetch_summary_html, page_title

__all__ = [
    "MOBILE_HTML_URL",
    "fetch_summary_html",
    "page_title",
]
