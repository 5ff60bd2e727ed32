"""Configuration for the attribution core."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from channelnav.tracking.attribution import DEFAULT_HALF_LIFE_DAYS, AttributionConfig
from channelnav.tracking.schema import AttributionModel

_TRUE_VALUES = {"1", "true", "yes", "on"}


class TrackingConfig(BaseModel):
    """Settings for attribution and reporting defaults."""

    default_attribution_model: AttributionModel = AttributionModel.LAST_TOUCH
    time_decay_half_life_days: float = Field(default=DEFAULT_HALF_LIFE_DAYS, gt=0)
    report_window_days: int = Field(default=30, gt=0)
    seed_defaults: bool = True
    currency: str = "USD"

    @classmethod
    def from_env(cls) -> TrackingConfig:
        """Load configuration from environment variables."""
        return cls(
            default_attribution_model=os.getenv(
                "CHANNELNAV_ATTRIBUTION_MODEL", AttributionModel.LAST_TOUCH.value
            ),
            time_decay_half_life_days=float(
                os.getenv("CHANNELNAV_HALF_LIFE_DAYS", DEFAULT_HALF_LIFE_DAYS)
            ),
            report_window_days=int(os.getenv("CHANNELNAV_REPORT_WINDOW_DAYS", "30")),
            seed_defaults=os.getenv("CHANNELNAV_SEED_DEFAULTS", "true").lower() in _TRUE_VALUES,
            currency=os.getenv("CHANNELNAV_CURRENCY", "USD"),
        )

    def attribution_config(
        self,
        model: AttributionModel | str | None = None,
        half_life_days: float | None = None,
    ) -> AttributionConfig:
        """Build an AttributionConfig, falling back to the configured defaults."""
        return AttributionConfig(
            model=AttributionModel(model) if model else self.default_attribution_model,
            time_decay_half_life_days=half_life_days or self.time_decay_half_life_days,
        )
