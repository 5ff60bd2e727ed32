"""Tracking storage - keyed collections for rules, mappings, costs and events.

Every core component receives a TrackingStore at construction. The
in-memory implementation is volatile: no durability, no transactions.
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, TypeVar

from channelnav.tracking.schema import (
    AttributionEvent,
    ChannelCost,
    MatchType,
    NormalizationRule,
    SourceMapping,
    UTMField,
    UTMRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_NORMALIZATION_RULES: tuple[NormalizationRule, ...] = tuple(
    NormalizationRule(
        id=f"norm-{i}",
        field=utm_field,
        match_type=MatchType.EXACT,
        match_value=match_value,
        normalized_value=normalized_value,
        priority=10,
    )
    for i, (utm_field, match_value, normalized_value) in enumerate(
        [
            (UTMField.SOURCE, "fb", "facebook"),
            (UTMField.SOURCE, "ig", "instagram"),
            (UTMField.SOURCE, "tw", "twitter"),
            (UTMField.SOURCE, "li", "linkedin"),
            (UTMField.MEDIUM, "cpc", "paid"),
            (UTMField.MEDIUM, "ppc", "paid"),
        ],
        start=1,
    )
)

DEFAULT_SOURCE_MAPPINGS: tuple[SourceMapping, ...] = tuple(
    SourceMapping(
        id=f"map-{i}",
        utm_source=utm_source,
        utm_medium=utm_medium,
        source=source,
        source_detail=source_detail,
        channel=channel,
        priority=priority,
    )
    for i, (utm_source, utm_medium, source, source_detail, channel, priority) in enumerate(
        [
            ("google", "cpc", "Google Ads", "Search", "Paid Search", 10),
            ("google", "organic", "Google", "Organic Search", "Organic Search", 10),
            ("facebook", "paid", "Facebook", "Paid Social", "Paid Social", 10),
            ("facebook", "organic", "Facebook", "Organic Social", "Organic Social", 10),
            ("linkedin", "paid", "LinkedIn", "Paid Social", "Paid Social", 10),
            ("email", None, "Email", "Newsletter", "Email", 5),
            ("direct", None, "Direct", "Direct Traffic", "Direct", 1),
        ],
        start=1,
    )
)


class TrackingStore(ABC):
    """Abstract storage for the attribution core.

    Subclasses implement the per-collection primitives. Filtered queries
    (by contact, channel, date range) are derived from the list methods and
    may be overridden where a backend can filter natively.

    Example:
        store = InMemoryTrackingStore()
        store.seed_defaults()
        normalizer = UTMNormalizer(store)
    """

    # Normalization rules

    @abstractmethod
    def add_normalization_rule(self, rule: NormalizationRule) -> None:
        """Insert or replace a normalization rule."""

    @abstractmethod
    def get_normalization_rule(self, rule_id: str) -> NormalizationRule | None:
        """Get a normalization rule by ID."""

    @abstractmethod
    def list_normalization_rules(self, active_only: bool = True) -> list[NormalizationRule]:
        """List rules by descending priority, ties in insertion order."""

    @abstractmethod
    def update_normalization_rule(self, rule_id: str, **updates: Any) -> NormalizationRule | None:
        """Update a normalization rule; None if not found."""

    @abstractmethod
    def delete_normalization_rule(self, rule_id: str) -> bool:
        """Delete a normalization rule; False if not found."""

    # Source mappings

    @abstractmethod
    def add_source_mapping(self, mapping: SourceMapping) -> None:
        """Insert or replace a source mapping."""

    @abstractmethod
    def get_source_mapping(self, mapping_id: str) -> SourceMapping | None:
        """Get a source mapping by ID."""

    @abstractmethod
    def list_source_mappings(self, active_only: bool = True) -> list[SourceMapping]:
        """List mappings by descending priority, ties in insertion order."""

    @abstractmethod
    def update_source_mapping(self, mapping_id: str, **updates: Any) -> SourceMapping | None:
        """Update a source mapping; None if not found."""

    @abstractmethod
    def delete_source_mapping(self, mapping_id: str) -> bool:
        """Delete a source mapping; False if not found."""

    # Channel costs

    @abstractmethod
    def add_channel_cost(self, cost: ChannelCost) -> None:
        """Insert or replace a channel cost entry."""

    @abstractmethod
    def get_channel_cost(self, cost_id: str) -> ChannelCost | None:
        """Get a channel cost entry by ID."""

    @abstractmethod
    def list_channel_costs(self) -> list[ChannelCost]:
        """List all channel cost entries."""

    @abstractmethod
    def update_channel_cost(self, cost_id: str, **updates: Any) -> ChannelCost | None:
        """Update a channel cost entry; None if not found."""

    @abstractmethod
    def delete_channel_cost(self, cost_id: str) -> bool:
        """Delete a channel cost entry; False if not found."""

    # UTM records

    @abstractmethod
    def add_utm_record(self, record: UTMRecord) -> None:
        """Insert a UTM record."""

    @abstractmethod
    def get_utm_record(self, record_id: str) -> UTMRecord | None:
        """Get a UTM record by ID."""

    @abstractmethod
    def list_utm_records(self) -> list[UTMRecord]:
        """List all UTM records in insertion order."""

    # Attribution events

    @abstractmethod
    def add_attribution_event(self, event: AttributionEvent) -> None:
        """Insert an attribution event."""

    @abstractmethod
    def get_attribution_event(self, event_id: str) -> AttributionEvent | None:
        """Get an attribution event by ID."""

    @abstractmethod
    def list_attribution_events(self) -> list[AttributionEvent]:
        """List all attribution events in insertion order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove everything from every collection."""

    # Derived queries

    def list_channel_costs_by_channel(self, channel: str) -> list[ChannelCost]:
        """List cost entries for one channel."""
        return [c for c in self.list_channel_costs() if c.channel == channel]

    def list_channel_costs_in_range(self, start_date: date, end_date: date) -> list[ChannelCost]:
        """List cost entries whose whole date range lies within [start_date, end_date]."""
        return [
            c
            for c in self.list_channel_costs()
            if c.start_date >= start_date and c.end_date <= end_date
        ]

    def list_utm_records_by_contact(self, contact_id: str) -> list[UTMRecord]:
        """List a contact's touchpoints in ascending timestamp order."""
        records = [r for r in self.list_utm_records() if r.contact_id == contact_id]
        return sorted(records, key=lambda r: r.timestamp)

    def list_utm_records_by_channel(self, channel: str) -> list[UTMRecord]:
        """List touchpoints classified into one channel."""
        return [r for r in self.list_utm_records() if r.channel == channel]

    def list_attribution_events_by_contact(self, contact_id: str) -> list[AttributionEvent]:
        """List attribution events for one contact."""
        return [e for e in self.list_attribution_events() if e.contact_id == contact_id]

    def list_attribution_events_by_channel(self, channel: str) -> list[AttributionEvent]:
        """List attribution events credited to one channel."""
        return [e for e in self.list_attribution_events() if e.channel == channel]

    def seed_defaults(self) -> None:
        """Load the default normalization rules and source mappings."""
        for rule in DEFAULT_NORMALIZATION_RULES:
            self.add_normalization_rule(rule)
        for mapping in DEFAULT_SOURCE_MAPPINGS:
            self.add_source_mapping(mapping)
        logger.info(
            f"Seeded {len(DEFAULT_NORMALIZATION_RULES)} normalization rules "
            f"and {len(DEFAULT_SOURCE_MAPPINGS)} source mappings"
        )


def _by_priority(items: list[T]) -> list[T]:
    # sorted() is stable, so equal priorities keep insertion order
    return sorted(items, key=lambda item: item.priority, reverse=True)  # type: ignore[attr-defined]


def _apply_updates(collection: dict[str, T], entity_id: str, updates: dict[str, Any]) -> T | None:
    """Replace an entity with an updated copy.

    Raises:
        ValueError: If the update tries to change the entity ID.
        TypeError: If an update names an unknown field.
    """
    existing = collection.get(entity_id)
    if existing is None:
        return None
    if "id" in updates and updates["id"] != entity_id:
        raise ValueError("Entity id cannot be changed")

    updated = dataclasses.replace(existing, **updates)  # type: ignore[type-var]
    collection[entity_id] = updated
    return updated


class InMemoryTrackingStore(TrackingStore):
    """Volatile dictionary-backed TrackingStore.

    Example:
        >>> store = InMemoryTrackingStore()
        >>> store.seed_defaults()
        >>> len(store.list_source_mappings())
        7
    """

    def __init__(self) -> None:
        self._normalization_rules: dict[str, NormalizationRule] = {}
        self._source_mappings: dict[str, SourceMapping] = {}
        self._channel_costs: dict[str, ChannelCost] = {}
        self._utm_records: dict[str, UTMRecord] = {}
        self._attribution_events: dict[str, AttributionEvent] = {}

    def add_normalization_rule(self, rule: NormalizationRule) -> None:
        self._normalization_rules[rule.id] = rule

    def get_normalization_rule(self, rule_id: str) -> NormalizationRule | None:
        return self._normalization_rules.get(rule_id)

    def list_normalization_rules(self, active_only: bool = True) -> list[NormalizationRule]:
        rules = list(self._normalization_rules.values())
        if active_only:
            rules = [r for r in rules if r.is_active]
        return _by_priority(rules)

    def update_normalization_rule(self, rule_id: str, **updates: Any) -> NormalizationRule | None:
        return _apply_updates(self._normalization_rules, rule_id, updates)

    def delete_normalization_rule(self, rule_id: str) -> bool:
        return self._normalization_rules.pop(rule_id, None) is not None

    def add_source_mapping(self, mapping: SourceMapping) -> None:
        self._source_mappings[mapping.id] = mapping

    def get_source_mapping(self, mapping_id: str) -> SourceMapping | None:
        return self._source_mappings.get(mapping_id)

    def list_source_mappings(self, active_only: bool = True) -> list[SourceMapping]:
        mappings = list(self._source_mappings.values())
        if active_only:
            mappings = [m for m in mappings if m.is_active]
        return _by_priority(mappings)

    def update_source_mapping(self, mapping_id: str, **updates: Any) -> SourceMapping | None:
        return _apply_updates(self._source_mappings, mapping_id, updates)

    def delete_source_mapping(self, mapping_id: str) -> bool:
        return self._source_mappings.pop(mapping_id, None) is not None

    def add_channel_cost(self, cost: ChannelCost) -> None:
        self._channel_costs[cost.id] = cost

    def get_channel_cost(self, cost_id: str) -> ChannelCost | None:
        return self._channel_costs.get(cost_id)

    def list_channel_costs(self) -> list[ChannelCost]:
        return list(self._channel_costs.values())

    def update_channel_cost(self, cost_id: str, **updates: Any) -> ChannelCost | None:
        return _apply_updates(self._channel_costs, cost_id, updates)

    def delete_channel_cost(self, cost_id: str) -> bool:
        return self._channel_costs.pop(cost_id, None) is not None

    def add_utm_record(self, record: UTMRecord) -> None:
        self._utm_records[record.id] = record

    def get_utm_record(self, record_id: str) -> UTMRecord | None:
        return self._utm_records.get(record_id)

    def list_utm_records(self) -> list[UTMRecord]:
        return list(self._utm_records.values())

    def add_attribution_event(self, event: AttributionEvent) -> None:
        self._attribution_events[event.id] = event

    def get_attribution_event(self, event_id: str) -> AttributionEvent | None:
        return self._attribution_events.get(event_id)

    def list_attribution_events(self) -> list[AttributionEvent]:
        return list(self._attribution_events.values())

    def clear(self) -> None:
        self._normalization_rules.clear()
        self._source_mappings.clear()
        self._channel_costs.clear()
        self._utm_records.clear()
        self._attribution_events.clear()
        logger.debug("Cleared in-memory tracking store")
