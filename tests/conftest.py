"""Shared pytest fixtures for acdiscovery tests.

This module provides common fixtures used across multiple test modules:
an in-memory discovery site, a fetcher routed to it and a typical app.
"""

from __future__ import annotations

import pytest

from acdiscovery.discovery.http import DiscoveryFetcher
from acdiscovery.models.app import App
from acdiscovery.testing import MetaSite
from tests.factories import APP_NAME


@pytest.fixture
def site() -> MetaSite:
    """Create an empty in-memory discovery site (every location answers 404)."""
    return MetaSite()


@pytest.fixture
def fetcher(site: MetaSite) -> DiscoveryFetcher:
    """Create a fetcher routed to the in-memory site."""
    return DiscoveryFetcher(transport=site.transport())


@pytest.fixture
def sample_app() -> App:
    """Create the app used by most walk tests.

    Returns:
        example.com/myapp with os, arch and version labels
    """
    return App(
        name=APP_NAME,
        labels={"os": "linux", "arch": "amd64", "version": "1.0.0"},
    )
