"""Pytest fixtures for shared-tracking tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from channelnav.tracking.schema import UTMParams, UTMRecord
from channelnav.tracking.storage import InMemoryTrackingStore

FIXED_NOW = datetime(2024, 2, 1, tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryTrackingStore:
    """Empty in-memory store."""
    return InMemoryTrackingStore()


@pytest.fixture
def seeded_store(store: InMemoryTrackingStore) -> InMemoryTrackingStore:
    """Store loaded with the default rules and mappings."""
    store.seed_defaults()
    return store


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2024-02-01T00:00:00Z."""
    return lambda: FIXED_NOW


def _make_record(
    record_id: str,
    contact_id: str | None,
    channel: str,
    timestamp: str,
    source: str = "Google Ads",
    source_detail: str = "Search",
    campaign: str | None = None,
) -> UTMRecord:
    """Build a stored-shape UTMRecord for tests."""
    params = UTMParams(utm_source="google", utm_medium="paid", utm_campaign=campaign)
    return UTMRecord(
        id=record_id,
        contact_id=contact_id,
        original_params=params,
        normalized_params=params,
        source=source,
        source_detail=source_detail,
        channel=channel,
        timestamp=datetime.fromisoformat(timestamp.replace("Z", "+00:00")),
    )


@pytest.fixture
def two_touch_store(store: InMemoryTrackingStore) -> InMemoryTrackingStore:
    """Contact with a Paid Search touch on Jan 1 and a Paid Social touch on Jan 15."""
    store.add_utm_record(
        _make_record("utm-1", "contact-1", "Paid Search", "2024-01-01T00:00:00Z")
    )
    store.add_utm_record(
        _make_record(
            "utm-2",
            "contact-1",
            "Paid Social",
            "2024-01-15T00:00:00Z",
            source="Facebook",
            source_detail="Paid Social",
        )
    )
    return store


@pytest.fixture
def make_record():
    """Factory for UTMRecords with fixed IDs and timestamps."""
    return _make_record
