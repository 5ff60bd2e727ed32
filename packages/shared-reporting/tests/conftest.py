"""Pytest fixtures for shared-reporting tests."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from channelnav.tracking.metrics import MetricsAggregator
from channelnav.tracking.schema import (
    AttributionEvent,
    AttributionModel,
    ChannelCost,
    CostPeriod,
    UTMParams,
    UTMRecord,
)
from channelnav.tracking.storage import InMemoryTrackingStore

REPORT_DAY = date(2024, 1, 31)


def _record(record_id: str, channel: str, source: str, day: int, campaign: str | None) -> UTMRecord:
    params = UTMParams(utm_source=source.lower(), utm_campaign=campaign)
    return UTMRecord(
        id=record_id,
        contact_id="c-1",
        original_params=params,
        normalized_params=params,
        source=source,
        source_detail="Detail",
        channel=channel,
        timestamp=datetime(2024, 1, day, tzinfo=UTC),
    )


def _event(contact_id: str, channel: str, revenue: float, day: int) -> AttributionEvent:
    return AttributionEvent(
        contact_id=contact_id,
        utm_record_id=f"utm-{contact_id}",
        channel=channel,
        source="Source",
        source_detail="Detail",
        attribution_model=AttributionModel.LAST_TOUCH,
        attribution_weight=1.0,
        revenue=revenue,
        timestamp=datetime(2024, 1, day, tzinfo=UTC),
    )


@pytest.fixture
def report_store() -> InMemoryTrackingStore:
    """
    January 2024 data across four channels.

    Contact c-1 touched Paid Social (Jan 5, campaign "winter") then Paid
    Search (Jan 15) and converted for 3000 on Paid Search. Contact c-2
    converted for 1000 on Paid Social. Spend: Paid Search 1000, Paid Social
    500, Display 200, Email 100.
    """
    store = InMemoryTrackingStore()
    store.add_utm_record(_record("utm-1", "Paid Social", "Facebook", 5, "winter"))
    store.add_utm_record(_record("utm-2", "Paid Search", "Google Ads", 15, None))

    store.add_attribution_event(_event("c-1", "Paid Search", 3000.0, 20))
    store.add_attribution_event(_event("c-2", "Paid Social", 1000.0, 21))

    for channel, cost in (
        ("Paid Search", 1000.0),
        ("Paid Social", 500.0),
        ("Display", 200.0),
        ("Email", 100.0),
    ):
        store.add_channel_cost(
            ChannelCost(
                channel=channel,
                cost=cost,
                period=CostPeriod.MONTHLY,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 31),
            )
        )
    return store


@pytest.fixture
def aggregator(report_store: InMemoryTrackingStore) -> MetricsAggregator:
    """Metrics aggregator over the report store."""
    return MetricsAggregator(report_store)


@pytest.fixture
def report_day() -> date:
    """Last day of the reporting window."""
    return REPORT_DAY
