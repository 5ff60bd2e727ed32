"""
ChannelNav Reporting - CRM card payloads and HTML detail views.

Supports:
- HubSpot CRM card JSON (attribution summary, touches, channel performance)
- HTML attribution detail view via Jinja2 templates

Usage:
    from channelnav.reporting import HTMLRenderer, build_crm_card, build_crm_card_data

    data = build_crm_card_data("12345", MetricsAggregator(store))
    card = build_crm_card(data)
    html = HTMLRenderer().render("attribution_details", data.to_dict())
"""

from channelnav.reporting.card import CRMCardData, build_crm_card, build_crm_card_data
from channelnav.reporting.html import HTMLRenderer

__all__ = [
    "CRMCardData",
    "build_crm_card",
    "build_crm_card_data",
    "HTMLRenderer",
]
