"""Pytest fixtures for shared-connectors tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from channelnav.connectors.config import HubSpotConfig
from channelnav.tracking.metrics import MetricsAggregator
from channelnav.tracking.schema import (
    AttributionEvent,
    AttributionModel,
    UTMParams,
    UTMRecord,
)
from channelnav.tracking.storage import InMemoryTrackingStore


@pytest.fixture
def hubspot_config() -> HubSpotConfig:
    """HubSpot configuration with a test token."""
    return HubSpotConfig(access_token="pat-na1-test-token")


@pytest.fixture
def mock_hubspot() -> Generator[MagicMock, None, None]:
    """Patch the hubspot package and the model submodules we import."""
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
def contact_store() -> InMemoryTrackingStore:
    """Store with two touchpoints and one attribution event for contact c-1."""
    store = InMemoryTrackingStore()
    for record_id, source, channel, campaign, day in (
        ("utm-1", "Google Ads", "Paid Search", "spring", 1),
        ("utm-2", "Facebook", "Paid Social", None, 10),
    ):
        params = UTMParams(utm_source="x", utm_campaign=campaign)
        store.add_utm_record(
            UTMRecord(
                id=record_id,
                contact_id="c-1",
                original_params=params,
                normalized_params=params,
                source=source,
                source_detail="Detail",
                channel=channel,
                timestamp=datetime(2024, 1, day, tzinfo=UTC),
            )
        )
    store.add_attribution_event(
        AttributionEvent(
            contact_id="c-1",
            utm_record_id="utm-2",
            channel="Paid Social",
            source="Facebook",
            source_detail="Detail",
            attribution_model=AttributionModel.LAST_TOUCH,
            attribution_weight=1.0,
            revenue=1200.0,
            timestamp=datetime(2024, 1, 11, tzinfo=UTC),
        )
    )
    return store


@pytest.fixture
def metrics(contact_store: InMemoryTrackingStore) -> MetricsAggregator:
    """Metrics aggregator over the contact store."""
    return MetricsAggregator(contact_store)
