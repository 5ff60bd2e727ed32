"""
Attribution - split conversion credit across a contact's touchpoints.

Supports multiple attribution models:
- Last-touch (default): Credit to last touchpoint
- First-touch: Credit to first touchpoint
- Linear: Equal credit to all touchpoints
- Time-decay: More credit to recent touchpoints (configurable half-life)

Weights for one conversion always sum to 1. Every event carries the full
conversion revenue; consumers multiply by ``attribution_weight``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from channelnav.tracking.schema import (
    AttributionEvent,
    AttributionModel,
    UTMRecord,
    parse_timestamp,
)
from channelnav.tracking.storage import TrackingStore

logger = logging.getLogger(__name__)

DEFAULT_HALF_LIFE_DAYS = 7.0

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class AttributionConfig:
    """Attribution model and its parameters."""

    model: AttributionModel = AttributionModel.LAST_TOUCH
    time_decay_half_life_days: float | None = DEFAULT_HALF_LIFE_DAYS

    def __post_init__(self):
        # Accept plain strings such as "linear"
        object.__setattr__(self, "model", AttributionModel(self.model))
        if self.time_decay_half_life_days is not None and self.time_decay_half_life_days < 0:
            raise ValueError(
                f"time_decay_half_life_days must be positive, got {self.time_decay_half_life_days}"
            )

    @property
    def half_life(self) -> timedelta:
        """Effective half-life; unset or zero falls back to the default."""
        return timedelta(days=self.time_decay_half_life_days or DEFAULT_HALF_LIFE_DAYS)


def first_touch_weights(n: int) -> list[float]:
    """100% credit to the first touchpoint."""
    weights = [0.0] * n
    if n > 0:
        weights[0] = 1.0
    return weights


def last_touch_weights(n: int) -> list[float]:
    """100% credit to the last touchpoint."""
    weights = [0.0] * n
    if n > 0:
        weights[-1] = 1.0
    return weights


def linear_weights(n: int) -> list[float]:
    """Equal credit to every touchpoint."""
    if n == 0:
        return []
    return [1.0 / n] * n


def time_decay_weights(
    timestamps: Sequence[datetime],
    half_life: timedelta,
    now: datetime,
) -> list[float]:
    """
    Credit halves for every half-life a touchpoint is older than ``now``.

    Raw weights are taken relative to the youngest touchpoint. This is the
    same distribution after normalization but cannot underflow to zero for
    very old touchpoints.
    """
    if not timestamps:
        return []

    ages = [(now - ts) / half_life for ts in timestamps]
    youngest = min(ages)
    raw = [0.5 ** (age - youngest) for age in ages]
    total = sum(raw)
    return [w / total for w in raw]


def calculate_weights(
    touchpoints: Sequence[UTMRecord],
    config: AttributionConfig,
    now: datetime,
) -> list[float]:
    """
    Calculate attribution weights for touchpoints in ascending time order.

    Args:
        touchpoints: The contact's touchpoints, oldest first
        config: Attribution model configuration
        now: Reference time for time decay

    Returns:
        One weight per touchpoint; empty for no touchpoints.
    """
    n = len(touchpoints)

    if config.model == AttributionModel.FIRST_TOUCH:
        return first_touch_weights(n)
    elif config.model == AttributionModel.LAST_TOUCH:
        return last_touch_weights(n)
    elif config.model == AttributionModel.LINEAR:
        return linear_weights(n)
    elif config.model == AttributionModel.TIME_DECAY:
        return time_decay_weights([tp.timestamp for tp in touchpoints], config.half_life, now)
    return last_touch_weights(n)


class AttributionCalculator:
    """
    Create and query attribution events.

    Example:
        calculator = AttributionCalculator(store)
        events = calculator.create_attribution(
            "contact-1",
            deal_id=None,
            revenue=1000.0,
            config=AttributionConfig(model=AttributionModel.LINEAR),
        )
    """

    def __init__(self, store: TrackingStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or utc_now

    def create_attribution(
        self,
        contact_id: str,
        deal_id: str | None,
        revenue: float,
        config: AttributionConfig | None = None,
    ) -> list[AttributionEvent]:
        """
        Attribute a conversion to the contact's touchpoints.

        Args:
            contact_id: Contact whose touchpoints receive credit
            deal_id: Optional deal the conversion belongs to
            revenue: Full conversion revenue
            config: Attribution model (default: last touch, 7-day half-life)

        Returns:
            The stored events, one per touchpoint with non-zero weight.
            Empty if the contact has no touchpoints.
        """
        config = config or AttributionConfig()
        touchpoints = self.store.list_utm_records_by_contact(contact_id)

        if not touchpoints:
            logger.info(f"No touchpoints for contact {contact_id}; nothing to attribute")
            return []

        now = parse_timestamp(self.clock(), "clock")
        weights = calculate_weights(touchpoints, config, now)
        events: list[AttributionEvent] = []

        for touchpoint, weight in zip(touchpoints, weights):
            if weight <= 0:
                continue

            event = AttributionEvent(
                contact_id=contact_id,
                deal_id=deal_id,
                utm_record_id=touchpoint.id,
                channel=touchpoint.channel,
                source=touchpoint.source,
                source_detail=touchpoint.source_detail,
                attribution_model=config.model,
                attribution_weight=weight,
                revenue=revenue,
                timestamp=now,
            )
            self.store.add_attribution_event(event)
            events.append(event)

        logger.info(
            f"Created {len(events)} {config.model.value} attribution events "
            f"for contact {contact_id}"
        )
        return events

    def get_contact_attribution(self, contact_id: str) -> list[AttributionEvent]:
        """Get all attribution events for a contact."""
        return self.store.list_attribution_events_by_contact(contact_id)

    def get_channel_attribution(self, channel: str) -> list[AttributionEvent]:
        """Get all attribution events credited to a channel."""
        return self.store.list_attribution_events_by_channel(channel)

    def append_recalculated_attribution(
        self,
        contact_id: str,
        new_config: AttributionConfig,
    ) -> list[AttributionEvent]:
        """
        Attribute the contact's implied revenue again under a new model.

        The implied revenue is ``sum(revenue * weight) / sum(weight)`` over
        the contact's existing events. Existing events are kept; the new
        events are appended alongside them.

        Returns:
            The newly created events, or an empty list if the contact has no
            events (or their weights sum to zero).
        """
        existing = self.store.list_attribution_events_by_contact(contact_id)
        if not existing:
            return []

        total_weight = sum(e.attribution_weight for e in existing)
        if total_weight == 0:
            return []

        revenue = sum(e.weighted_revenue for e in existing) / total_weight
        deal_id = next((e.deal_id for e in existing if e.deal_id), None)

        logger.info(
            f"Recalculating attribution for contact {contact_id} "
            f"with {new_config.model.value} (revenue {revenue:.2f})"
        )
        return self.create_attribution(contact_id, deal_id, revenue, new_config)
