"""
ChannelNav Tracking - UTM normalization, channel mapping and attribution.

Provides:
- UTM schema, normalization rules and source mappings
- Ingestion pipeline for single touchpoints and batches (DataFrame or dicts)
- Multi-touch attribution (first touch, last touch, linear, time decay)
- CAC / ROI / ROAS metrics per channel, per contact and overall

Every component takes a TrackingStore, so the same store can be shared or
swapped out in tests.

Usage:
    from channelnav.tracking import (
        AttributionCalculator,
        AttributionConfig,
        InMemoryTrackingStore,
        IngestRequest,
        MetricsAggregator,
        UTMIngestionService,
        UTMParams,
    )

    store = InMemoryTrackingStore()
    store.seed_defaults()

    ingestion = UTMIngestionService(store)
    ingestion.ingest(IngestRequest(params=UTMParams(utm_source="fb"), contact_id="c-1"))

    AttributionCalculator(store).create_attribution("c-1", None, 1000.0)
    MetricsAggregator(store).channel_metrics(start_date, end_date)
"""

from channelnav.tracking.attribution import (
    AttributionCalculator,
    AttributionConfig,
    calculate_weights,
)
from channelnav.tracking.config import TrackingConfig
from channelnav.tracking.ingestion import (
    BatchIngestResult,
    IngestRequest,
    IngestResult,
    UTMIngestionService,
)
from channelnav.tracking.mapper import SourceMapper, SourceMappingResult
from channelnav.tracking.metrics import MetricsAggregator
from channelnav.tracking.normalizer import UTMNormalizer, ValidationResult
from channelnav.tracking.schema import (
    AttributionEvent,
    AttributionModel,
    Channel,
    ChannelCost,
    ChannelMetrics,
    ContactMetrics,
    CostPeriod,
    MatchType,
    MetricsFilter,
    NormalizationRule,
    OverallMetrics,
    SourceMapping,
    TouchpointSummary,
    UTMField,
    UTMParams,
    UTMRecord,
)
from channelnav.tracking.storage import InMemoryTrackingStore, TrackingStore

__all__ = [
    # Schema
    "UTMParams",
    "UTMField",
    "MatchType",
    "Channel",
    "CostPeriod",
    "NormalizationRule",
    "SourceMapping",
    "UTMRecord",
    "AttributionModel",
    "AttributionEvent",
    "ChannelCost",
    "MetricsFilter",
    "ChannelMetrics",
    "OverallMetrics",
    "ContactMetrics",
    "TouchpointSummary",
    # Storage
    "TrackingStore",
    "InMemoryTrackingStore",
    # Normalization and mapping
    "UTMNormalizer",
    "ValidationResult",
    "SourceMapper",
    "SourceMappingResult",
    # Ingestion
    "UTMIngestionService",
    "IngestRequest",
    "IngestResult",
    "BatchIngestResult",
    # Attribution
    "AttributionCalculator",
    "AttributionConfig",
    "calculate_weights",
    # Metrics
    "MetricsAggregator",
    # Config
    "TrackingConfig",
]
