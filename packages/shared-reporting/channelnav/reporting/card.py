"""
CRM card - HubSpot custom card payload for a contact's attribution.

The card shows the contact's attribution summary, first and last touch,
overall channel performance for the reporting window and the top three
channels. Its primary action opens the detail view in an iframe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from channelnav.tracking.metrics import MetricsAggregator
from channelnav.tracking.schema import (
    ChannelMetrics,
    ContactMetrics,
    OverallMetrics,
    TouchpointSummary,
)

TOP_CHANNELS = 3
IFRAME_WIDTH = 890
IFRAME_HEIGHT = 748


@dataclass
class CRMCardData:
    """Everything the card and detail view display for one contact."""

    contact_id: str
    contact: ContactMetrics
    channel_metrics: list[ChannelMetrics]
    overall_metrics: OverallMetrics
    window_days: int = 30
    period_end: date = field(default_factory=lambda: datetime.now(UTC).date())

    @property
    def touchpoints(self) -> list[TouchpointSummary]:
        return self.contact.touchpoints

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (also the detail template context)."""
        return {
            "contact_id": self.contact_id,
            "touchpoints": [tp.to_dict() for tp in self.touchpoints],
            "attributed_revenue": self.contact.attributed_revenue,
            "attributed_cac": self.contact.attributed_cac,
            "channel_metrics": [cm.to_dict() for cm in self.channel_metrics],
            "overall_metrics": self.overall_metrics.to_dict(),
            "window_days": self.window_days,
            "period_end": self.period_end.isoformat(),
        }


def build_crm_card_data(
    contact_id: str,
    aggregator: MetricsAggregator,
    window_days: int = 30,
    today: date | None = None,
) -> CRMCardData:
    """
    Collect contact and channel metrics for the card.

    Args:
        contact_id: Contact to describe
        aggregator: Metrics source
        window_days: Length of the reporting window ending today
        today: Last day of the window (default: current UTC date)
    """
    end_date = today or datetime.now(UTC).date()
    start_date = end_date - timedelta(days=window_days)

    return CRMCardData(
        contact_id=contact_id,
        contact=aggregator.contact_metrics(contact_id),
        channel_metrics=aggregator.channel_metrics(start_date, end_date),
        overall_metrics=aggregator.overall_metrics(start_date, end_date),
        window_days=window_days,
        period_end=end_date,
    )


def _currency(label: str, value: float, currency: str) -> dict[str, Any]:
    return {
        "label": label,
        "dataType": "CURRENCY",
        "value": f"{value:.2f}",
        "currencyCode": currency,
    }


def _touch_section(object_id: int, title: str, touchpoint: TouchpointSummary) -> dict[str, Any]:
    return {
        "objectId": object_id,
        "title": title,
        "properties": [
            {"label": "Channel", "dataType": "STRING", "value": touchpoint.channel},
            {"label": "Source", "dataType": "STRING", "value": touchpoint.source},
            {
                "label": "Campaign",
                "dataType": "STRING",
                "value": touchpoint.utm_campaign or "N/A",
            },
            {"label": "Date", "dataType": "DATE", "value": touchpoint.timestamp.isoformat()},
        ],
    }


def build_crm_card(
    data: CRMCardData,
    card_base_url: str = "/api/crm-card",
    currency: str = "USD",
) -> dict[str, Any]:
    """
    Build the HubSpot CRM card response.

    Args:
        data: Card data from build_crm_card_data
        card_base_url: Base URL that serves the detail view
        currency: Currency code for monetary properties

    Returns:
        Dictionary with ``results`` sections and an IFRAME ``primaryAction``.
    """
    touchpoints = data.touchpoints
    overall = data.overall_metrics

    results: list[dict[str, Any]] = [
        {
            "objectId": 1,
            "title": "Attribution Summary",
            "properties": [
                {"label": "Total Touchpoints", "dataType": "NUMERIC", "value": len(touchpoints)},
                _currency("Attributed Revenue", data.contact.attributed_revenue, currency),
                _currency("Attributed CAC", data.contact.attributed_cac, currency),
            ],
        }
    ]

    if touchpoints:
        results.append(_touch_section(2, "First Touch", touchpoints[0]))
    if len(touchpoints) > 1:
        results.append(_touch_section(3, "Last Touch", touchpoints[-1]))

    results.append(
        {
            "objectId": 4,
            "title": f"Channel Performance ({data.window_days} days)",
            "properties": [
                _currency("Overall CAC", overall.total_cac, currency),
                {
                    "label": "Overall ROI",
                    "dataType": "NUMERIC",
                    "value": f"{overall.average_roi:.1f}%",
                },
                _currency("Total Revenue", overall.total_revenue, currency),
                _currency("Total Spend", overall.total_cost, currency),
            ],
        }
    )

    for index, cm in enumerate(data.channel_metrics[:TOP_CHANNELS]):
        results.append(
            {
                "objectId": 5 + index,
                "title": f"{cm.channel} Performance",
                "properties": [
                    _currency("CAC", cm.cac, currency),
                    {"label": "ROI", "dataType": "NUMERIC", "value": f"{cm.roi:.1f}%"},
                    {"label": "ROAS", "dataType": "NUMERIC", "value": f"{cm.roas:.2f}"},
                    {"label": "Conversions", "dataType": "NUMERIC", "value": cm.conversions},
                ],
            }
        )

    details_uri = f"{card_base_url.rstrip('/')}/details?{urlencode({'contactId': data.contact_id})}"
    return {
        "results": results,
        "primaryAction": {
            "type": "IFRAME",
            "width": IFRAME_WIDTH,
            "height": IFRAME_HEIGHT,
            "uri": details_uri,
            "label": "View Full Attribution Details",
        },
    }
