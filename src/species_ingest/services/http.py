"""
Shared HTTP client with classification-driven retry and backoff.

Provides a pre-configured ``requests.Session`` and a ``RetryingFetcher`` that
wraps it.  The session itself never retries; every failure is classified once
into a ``FetchErrorKind`` and only the transient kinds (rate limiting,
connection resets/aborts, interrupted TLS handshakes) are retried with
exponential backoff.  Everything else fails fast.

Usage::

    from species_ingest.services.http import fetcher

    data = fetcher.get_json("https://api.example.com/v1/data", params={"q": 1})
"""

from __future__ import annotations

import http.client
import ssl
import time
from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from species_ingest.config import get_settings

#: No adapter-level retries: retry decisions belong to ``RetryingFetcher``.
NO_RETRY = Retry(total=0, read=False, raise_on_status=False)

DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0  # seconds; attempt k waits base * 2**k


class FetchErrorKind(StrEnum):
    """Closed set of ways a single GET can fail."""

    RATE_LIMITED = "rate_limited"
    CONNECTION_RESET = "connection_reset"
    CONNECTION_ABORTED = "connection_aborted"
    TLS_HANDSHAKE_INTERRUPTED = "tls_handshake_interrupted"
    PERMANENT = "permanent"
    MALFORMED = "malformed"


#: The only kinds that are worth another attempt.
TRANSIENT_KINDS = frozenset(
    {
        FetchErrorKind.RATE_LIMITED,
        FetchErrorKind.CONNECTION_RESET,
        FetchErrorKind.CONNECTION_ABORTED,
        FetchErrorKind.TLS_HANDSHAKE_INTERRUPTED,
    }
)


class UpstreamError(Exception):
    """Base class for every failure surfaced by the fetch layer."""


class FetchError(UpstreamError):
    """A single classified fetch failure."""

    def __init__(self, kind: FetchErrorKind, url: str, status_code: int | None = None) -> None:
        self.kind = kind
        self.url = url
        self.status_code = status_code
        detail = f"{kind} (HTTP {status_code})" if status_code is not None else str(kind)
        super().__init__(f"{detail}: {url}")

    @property
    def retryable(self) -> bool:
        return self.kind in TRANSIENT_KINDS


class RetriesExhaustedError(UpstreamError):
    """Raised when every attempt failed with a transient error."""

    def __init__(self, url: str, attempts: int, last_error: FetchError | None) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {url}")


def _causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` and every exception wrapped inside it.

    requests/urllib3 bury the socket-level error in ``__cause__``,
    ``MaxRetryError.reason`` or ``ProtocolError.args``.
    """
    stack: list[BaseException] = [exc]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        linked = [current.__cause__, current.__context__, getattr(current, "reason", None)]
        linked.extend(current.args)
        stack.extend(e for e in linked if isinstance(e, BaseException))


def classify_exception(exc: requests.RequestException) -> FetchErrorKind:
    """Map a transport-level exception to a ``FetchErrorKind``."""
    chain = list(_causes(exc))
    # Order matters: RemoteDisconnected subclasses ConnectionResetError.
    if any(isinstance(e, ssl.SSLEOFError | ssl.SSLZeroReturnError) for e in chain):
        return FetchErrorKind.TLS_HANDSHAKE_INTERRUPTED
    if any(
        isinstance(e, http.client.RemoteDisconnected | ConnectionAbortedError | requests.Timeout)
        for e in chain
    ):
        return FetchErrorKind.CONNECTION_ABORTED
    if any(isinstance(e, ConnectionResetError) for e in chain):
        return FetchErrorKind.CONNECTION_RESET
    return FetchErrorKind.PERMANENT


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with a (non-retrying) adapter mounted.

    Args:
        retry: Custom adapter retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = "species-ingest/0.1"

    # Inject a default timeout so callers don't need to pass ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


class RetryingFetcher:
    """Issue one logical GET, retrying transient failures with backoff."""

    def __init__(
        self,
        session: requests.Session,
        *,
        attempts: int = DEFAULT_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            msg = f"attempts must be >= 1, got {attempts}"
            raise ValueError(msg)
        self.session = session
        self.attempts = attempts
        self.base_delay = base_delay
        self.sleep = sleep

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET ``url`` and decode a JSON object body."""
        resp = self._get(url, params)
        try:
            data = resp.json()
        except ValueError:
            raise FetchError(FetchErrorKind.MALFORMED, url, resp.status_code) from None
        if not isinstance(data, dict):
            raise FetchError(FetchErrorKind.MALFORMED, url, resp.status_code)
        return data

    def get_text(self, url: str, params: dict[str, Any] | None = None) -> str:
        """GET ``url`` and return the body as text."""
        return self._get(url, params).text

    def _get(self, url: str, params: dict[str, Any] | None) -> requests.Response:
        last_error: FetchError | None = None
        for attempt in range(self.attempts):
            try:
                return self._attempt(url, params)
            except FetchError as exc:
                if not exc.retryable:
                    print(f"Failed fetching {url}: {exc}")
                    raise
                last_error = exc
            if attempt + 1 < self.attempts:
                wait = self.base_delay * 2**attempt
                print(
                    f"Retrying ({attempt + 1}/{self.attempts}) in {wait:g}s "
                    f"after {last_error.kind}: {url}"
                )
                self.sleep(wait)
        raise RetriesExhaustedError(url, self.attempts, last_error)

    def _attempt(self, url: str, params: dict[str, Any] | None) -> requests.Response:
        try:
            resp = self.session.get(url, params=params or {})
        except requests.RequestException as exc:
            raise FetchError(classify_exception(exc), url) from exc
        if resp.status_code == 429:
            raise FetchError(FetchErrorKind.RATE_LIMITED, url, 429)
        if resp.status_code >= 400:
            raise FetchError(FetchErrorKind.PERMANENT, url, resp.status_code)
        return resp


def create_fetcher(session: requests.Session | None = None) -> RetryingFetcher:
    """Build a ``RetryingFetcher`` from application settings."""
    settings = get_settings()
    return RetryingFetcher(
        session or create_session(timeout=settings.http_timeout),
        attempts=settings.retry_attempts,
        base_delay=settings.retry_base_delay,
    )


#: Module-level session, import and use directly.
session: requests.Session = create_session(timeout=get_settings().http_timeout)

#: Module-level fetcher used when callers don't inject their own.
fetcher: RetryingFetcher = create_fetcher(session)


def default_fetcher(override: RetryingFetcher | None = None) -> RetryingFetcher:
    """Return ``override`` or the module-level fetcher."""
    return override if override is not None else fetcher
