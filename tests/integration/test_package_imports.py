"""Integration tests for package imports and the end-to-end attribution flow."""

from datetime import UTC, date, datetime

import pandas as pd
import pytest


class TestAllPackagesImportable:
    """Test that all ChannelNav packages can be imported together."""

    def test_tracking_package_imports(self):
        """Tracking package classes should be importable."""
        from channelnav.tracking import (
            AttributionCalculator,
            InMemoryTrackingStore,
            MetricsAggregator,
            SourceMapper,
            UTMIngestionService,
            UTMNormalizer,
        )

        assert InMemoryTrackingStore is not None
        assert UTMNormalizer is not None
        assert SourceMapper is not None
        assert UTMIngestionService is not None
        assert AttributionCalculator is not None
        assert MetricsAggregator is not None

    def test_reporting_package_imports(self):
        """Reporting package classes should be importable."""
        from channelnav.reporting import HTMLRenderer, build_crm_card, build_crm_card_data

        assert HTMLRenderer is not None
        assert build_crm_card is not None
        assert build_crm_card_data is not None

    def test_connectors_package_imports(self):
        """Connector classes should be importable."""
        from channelnav.connectors import HubSpotConfig, HubSpotContactSync, SyncError

        assert HubSpotConfig is not None
        assert HubSpotContactSync is not None
        assert SyncError is not None

    def test_mcp_server_imports(self):
        """MCP server should be importable."""
        from channelnav_mcp.server import create_attribution, ingest_utm, mcp

        assert mcp is not None
        assert callable(ingest_utm)
        assert callable(create_attribution)


class TestCrossPackageIntegration:
    """Test that packages work together."""

    @pytest.fixture
    def store(self, sample_utm_rows, sample_channel_costs):
        from channelnav.tracking import ChannelCost, InMemoryTrackingStore, UTMIngestionService

        store = InMemoryTrackingStore()
        store.seed_defaults()

        batch = UTMIngestionService(store).ingest_batch(pd.DataFrame(sample_utm_rows))
        assert batch.errors == []

        for cost in sample_channel_costs:
            store.add_channel_cost(ChannelCost.from_dict(cost))
        return store

    @pytest.fixture
    def attributed_store(self, store):
        from channelnav.tracking import AttributionCalculator, AttributionConfig, AttributionModel

        calculator = AttributionCalculator(store, clock=lambda: datetime(2025, 1, 20, tzinfo=UTC))
        calculator.create_attribution(
            "CONTACT-001", "DEAL-1", 2000.0, AttributionConfig(model=AttributionModel.LINEAR)
        )
        calculator.create_attribution("CONTACT-002", None, 300.0)
        return store

    def test_dataframe_ingestion_classifies_channels(self, store):
        """Rows from a DataFrame are normalized and mapped."""
        channels = [r.channel for r in store.list_utm_records()]

        assert channels == ["Paid Social", "Paid Search", "Email"]
        first = store.list_utm_records_by_contact("CONTACT-001")[0]
        assert first.normalized_params.utm_campaign == "spring_promo"

    def test_metrics_over_attributed_data(self, attributed_store):
        """Attribution events feed the period metrics."""
        from channelnav.tracking import MetricsAggregator

        overall = MetricsAggregator(attributed_store).overall_metrics(
            date(2025, 1, 1), date(2025, 1, 31)
        )

        assert overall.total_revenue == pytest.approx(2300.0)
        assert overall.total_cost == pytest.approx(1050.0)
        assert overall.total_conversions == pytest.approx(2.0)
        assert overall.total_cac == pytest.approx(525.0)

    def test_crm_card_and_contact_properties_agree(self, attributed_store):
        """The CRM card and HubSpot properties describe the same contact."""
        from channelnav.connectors import build_contact_properties
        from channelnav.reporting import build_crm_card, build_crm_card_data
        from channelnav.tracking import MetricsAggregator

        aggregator = MetricsAggregator(attributed_store)
        data = build_crm_card_data("CONTACT-001", aggregator, today=date(2025, 1, 31))
        card = build_crm_card(data)
        properties = build_contact_properties(aggregator.contact_metrics("CONTACT-001"))

        summary = {p["label"]: p["value"] for p in card["results"][0]["properties"]}
        assert summary["Attributed Revenue"] == "2000.00"
        assert properties["attributed_revenue"] == "2000.0"
        assert properties["total_touchpoints"] == "2"
        assert properties["utm_first_touch_channel"] == "Paid Social"
        assert properties["utm_last_touch_channel"] == "Paid Search"
