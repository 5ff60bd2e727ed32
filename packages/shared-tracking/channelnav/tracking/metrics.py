"""
Metrics - CAC, ROI and ROAS from channel costs and attribution events.

Formulas:
- CAC  = total cost / conversions
- ROI  = (revenue - cost) / cost * 100
- ROAS = revenue / cost

Conversions are the sum of attribution weights, so a contact credited 0.5 to
a channel counts as half a conversion there. Revenue is
``revenue * attribution_weight`` per event. Every ratio is 0 when its
denominator is 0.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

from channelnav.tracking.schema import (
    AttributionEvent,
    ChannelMetrics,
    ContactMetrics,
    MetricsFilter,
    OverallMetrics,
    TouchpointSummary,
)
from channelnav.tracking.storage import TrackingStore


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 for a zero denominator."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _window(filters: MetricsFilter) -> tuple[datetime, datetime]:
    """Aware UTC bounds: start of start_date to end of end_date (exclusive)."""
    start = datetime.combine(filters.start_date, time.min, tzinfo=UTC)
    end = datetime.combine(filters.end_date + timedelta(days=1), time.min, tzinfo=UTC)
    return start, end


def _matches_dimensions(item, filters: MetricsFilter) -> bool:
    if filters.channel and item.channel != filters.channel:
        return False
    if filters.source and item.source != filters.source:
        return False
    if filters.source_detail and item.source_detail != filters.source_detail:
        return False
    return True


class MetricsAggregator:
    """
    Read-side metric computations over a TrackingStore.

    Example:
        aggregator = MetricsAggregator(store)
        filters = MetricsFilter(date(2024, 1, 1), date(2024, 1, 31), channel="Paid Search")
        aggregator.calculate_cac(filters)  # 500.0
    """

    def __init__(self, store: TrackingStore):
        self.store = store

    def total_cost(self, filters: MetricsFilter) -> float:
        """Sum cost entries that lie entirely within the filter window."""
        costs = self.store.list_channel_costs_in_range(filters.start_date, filters.end_date)
        return sum(c.cost for c in costs if _matches_dimensions(c, filters))

    def attribution_events(self, filters: MetricsFilter) -> list[AttributionEvent]:
        """Attribution events inside the window matching the filter dimensions."""
        start, end = _window(filters)
        return [
            e
            for e in self.store.list_attribution_events()
            if start <= e.timestamp < end and _matches_dimensions(e, filters)
        ]

    def total_revenue(self, filters: MetricsFilter) -> float:
        """Sum of weighted revenue over matching events."""
        return sum(e.weighted_revenue for e in self.attribution_events(filters))

    def conversions(self, filters: MetricsFilter) -> float:
        """Fractional conversion count: sum of attribution weights."""
        return sum(e.attribution_weight for e in self.attribution_events(filters))

    def calculate_cac(self, filters: MetricsFilter) -> float:
        """Customer acquisition cost."""
        return safe_divide(self.total_cost(filters), self.conversions(filters))

    def calculate_roi(self, filters: MetricsFilter) -> float:
        """Return on investment as a percentage."""
        cost = self.total_cost(filters)
        return safe_divide(self.total_revenue(filters) - cost, cost) * 100

    def calculate_roas(self, filters: MetricsFilter) -> float:
        """Return on ad spend."""
        return safe_divide(self.total_revenue(filters), self.total_cost(filters))

    def channels(self) -> list[str]:
        """Distinct channels across touchpoints and costs, in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.store.list_utm_records():
            seen.setdefault(record.channel, None)
        for cost in self.store.list_channel_costs():
            seen.setdefault(cost.channel, None)
        return list(seen)

    def channel_metrics(self, start_date: date, end_date: date) -> list[ChannelMetrics]:
        """
        Metrics for every channel with any cost, revenue or conversions.

        Args:
            start_date: First day of the period
            end_date: Last day of the period (inclusive)
        """
        period = MetricsFilter(start_date=start_date, end_date=end_date)
        metrics: list[ChannelMetrics] = []

        for channel in self.channels():
            filters = period.for_channel(channel)
            total_cost = self.total_cost(filters)
            total_revenue = self.total_revenue(filters)
            conversions = self.conversions(filters)

            if total_cost <= 0 and total_revenue <= 0 and conversions <= 0:
                continue

            metrics.append(
                ChannelMetrics(
                    channel=channel,
                    period_start=start_date,
                    period_end=end_date,
                    total_cost=total_cost,
                    total_revenue=total_revenue,
                    conversions=conversions,
                    cac=safe_divide(total_cost, conversions),
                    roi=safe_divide(total_revenue - total_cost, total_cost) * 100,
                    roas=safe_divide(total_revenue, total_cost),
                )
            )

        return metrics

    def contact_metrics(self, contact_id: str) -> ContactMetrics:
        """
        Touchpoints, attributed revenue and apportioned CAC for one contact.

        The CAC apportions each credited channel's total cost (all cost
        entries, regardless of period) by the contact's share of that
        channel's attribution weight.
        """
        records = self.store.list_utm_records_by_contact(contact_id)
        events = self.store.list_attribution_events_by_contact(contact_id)

        touchpoints = [
            TouchpointSummary(
                channel=r.channel,
                source=r.source,
                source_detail=r.source_detail,
                timestamp=r.timestamp,
                utm_campaign=r.normalized_params.utm_campaign,
            )
            for r in records
        ]

        attributed_revenue = sum(e.weighted_revenue for e in events)

        attributed_cost = 0.0
        for channel in dict.fromkeys(e.channel for e in events):
            contact_weight = sum(e.attribution_weight for e in events if e.channel == channel)
            total_weight = sum(
                e.attribution_weight
                for e in self.store.list_attribution_events_by_channel(channel)
            )
            channel_cost = sum(c.cost for c in self.store.list_channel_costs_by_channel(channel))
            attributed_cost += safe_divide(channel_cost * contact_weight, total_weight)

        return ContactMetrics(
            contact_id=contact_id,
            touchpoints=touchpoints,
            attributed_revenue=attributed_revenue,
            attributed_cac=attributed_cost,
        )

    def overall_metrics(self, start_date: date, end_date: date) -> OverallMetrics:
        """Totals across all channels for a period."""
        filters = MetricsFilter(start_date=start_date, end_date=end_date)
        total_cost = self.total_cost(filters)
        total_revenue = self.total_revenue(filters)
        total_conversions = self.conversions(filters)

        return OverallMetrics(
            total_cac=safe_divide(total_cost, total_conversions),
            average_roi=safe_divide(total_revenue - total_cost, total_cost) * 100,
            total_revenue=total_revenue,
            total_cost=total_cost,
            total_conversions=total_conversions,
        )
