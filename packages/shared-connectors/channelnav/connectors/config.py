"""Configuration for CRM connectors."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


class HubSpotConfig(BaseModel):
    """Configuration for the HubSpot contact sync."""

    # repr=False keeps the token out of logs
    access_token: str | None = Field(default=None, repr=False)
    property_group: str = "utm_tracking"
    card_base_url: str = "/api/crm-card"

    @classmethod
    def from_env(cls) -> HubSpotConfig:
        """Load configuration from environment variables."""
        return cls(
            access_token=os.getenv("HUBSPOT_ACCESS_TOKEN") or None,
            card_base_url=os.getenv("CHANNELNAV_CARD_BASE_URL", "/api/crm-card"),
        )

    @property
    def is_configured(self) -> bool:
        """Whether an access token is available."""
        return bool(self.access_token)
