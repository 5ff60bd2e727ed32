"""Shared pytest fixtures for ChannelNav packages."""

import pytest


@pytest.fixture
def sample_utm_rows():
    """Sample touchpoint rows as exported from a web analytics tool."""
    return [
        {
            "utm_source": "fb",
            "utm_medium": "cpc",
            "utm_campaign": "Spring Promo",
            "contact_id": "CONTACT-001",
            "timestamp": "2025-01-05T10:30:00Z",
        },
        {
            "utm_source": "google",
            "utm_medium": "cpc",
            "utm_campaign": "brand",
            "contact_id": "CONTACT-001",
            "timestamp": "2025-01-12T09:00:00Z",
        },
        {
            "utm_source": "newsletter",
            "utm_medium": "email",
            "contact_id": "CONTACT-002",
            "timestamp": "2025-01-08T08:00:00Z",
        },
    ]


@pytest.fixture
def sample_channel_costs():
    """Sample January 2025 spend per channel."""
    return [
        {
            "channel": "Paid Social",
            "cost": 600.0,
            "period": "monthly",
            "start_date": "2025-01-01",
            "end_date": "2025-01-31",
        },
        {
            "channel": "Paid Search",
            "cost": 400.0,
            "period": "monthly",
            "start_date": "2025-01-01",
            "end_date": "2025-01-31",
        },
        {
            "channel": "Email",
            "cost": 50.0,
            "period": "monthly",
            "start_date": "2025-01-01",
            "end_date": "2025-01-31",
        },
    ]
