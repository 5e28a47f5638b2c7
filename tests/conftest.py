"""Shared fixtures."""

from __future__ import annotations

import pytest
from fakes import RoutedSession

from species_ingest.services.http import RetryingFetcher


@pytest.fixture
def sleeps() -> list[float]:
    """Records every delay requested through the fetcher's clock."""
    return []


@pytest.fixture
def routed_session() -> RoutedSession:
    return RoutedSession()


@pytest.fixture
def fetcher(routed_session: RoutedSession, sleeps: list[float]) -> RetryingFetcher:
    """A fetcher over ``routed_session`` that never really sleeps."""
    return RetryingFetcher(routed_session, sleep=sleeps.append)  # type: ignore[arg-type]
