"""Pytest fixtures for MCP server tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from channelnav.connectors import HubSpotConfig
from channelnav.tracking import InMemoryTrackingStore, TrackingConfig
from channelnav_mcp import server

FIXED_NOW = datetime(2024, 1, 31, 12, 0, tzinfo=UTC)


@pytest.fixture
def services() -> Generator[server.Services, None, None]:
    """Server services over a fresh seeded store with a fixed clock and no HubSpot token."""
    services = server.configure(
        store=InMemoryTrackingStore(),
        config=TrackingConfig(),
        hubspot_config=HubSpotConfig(),
        clock=lambda: FIXED_NOW,
    )
    yield services
    server._services = None


@pytest.fixture
def mock_hubspot() -> Generator[MagicMock, None, None]:
    """Patch the hubspot package and the model submodules the connector imports."""
    hubspot = MagicMock()
    modules = {
        "hubspot": hubspot,
        "hubspot.crm": hubspot.crm,
        "hubspot.crm.contacts": hubspot.crm.contacts,
        "hubspot.crm.properties": hubspot.crm.properties,
    }
    with patch.dict("sys.modules", modules):
        yield hubspot


@pytest.fixture
def hubspot_services(mock_hubspot: MagicMock) -> Generator[server.Services, None, None]:
    """Server services with a HubSpot token and a mocked client."""
    services = server.configure(
        store=InMemoryTrackingStore(),
        config=TrackingConfig(),
        hubspot_config=HubSpotConfig(access_token="pat-na1-test-token"),
        clock=lambda: FIXED_NOW,
    )
    yield services
    server._services = None
