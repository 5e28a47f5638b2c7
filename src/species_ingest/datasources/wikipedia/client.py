"""Wikipedia REST API constants.

API docs: https://en.wikipedia.org/api/rest_v1/
"""

REST_API_BASE = "https://en.wikipedia.org/api/rest_v1"
MOBILE_HTML_URL = f"{REST_API_BASE}/page/mobile-html"

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~"
TITLE_SAFE_CHARS = "!*'()"
