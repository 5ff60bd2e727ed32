"""
Tracking schema - platform-agnostic UTM, attribution and cost data model.

This schema covers everything the attribution core reads or writes:
- Raw and normalized UTM parameters
- Normalization rules and source mappings (administrative configuration)
- Touchpoints (UTM records) and attribution events
- Channel cost entries and derived channel metrics

All timestamps are timezone-aware datetime objects in UTC. Naive values
coming in from callers are interpreted as UTC so touchpoints from different
sources order and subtract consistently.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4


class UTMField(str, Enum):
    """UTM parameter names a normalization rule can target."""

    SOURCE = "utm_source"
    MEDIUM = "utm_medium"
    CAMPAIGN = "utm_campaign"
    TERM = "utm_term"
    CONTENT = "utm_content"


class MatchType(str, Enum):
    """How a normalization rule compares a value to its pattern."""

    EXACT = "exact"
    CONTAINS = "contains"
    REGEX = "regex"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class AttributionModel(str, Enum):
    """Credit-assignment model for multi-touch attribution."""

    FIRST_TOUCH = "first_touch"
    LAST_TOUCH = "last_touch"
    LINEAR = "linear"  # Equal credit to all touchpoints
    TIME_DECAY = "time_decay"  # More credit to recent touchpoints


class CostPeriod(str, Enum):
    """Granularity of a channel cost entry."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Channel(str, Enum):
    """Default channel taxonomy used when no source mapping matches."""

    PAID_SEARCH = "Paid Search"
    ORGANIC_SEARCH = "Organic Search"
    PAID_SOCIAL = "Paid Social"
    ORGANIC_SOCIAL = "Organic Social"
    SOCIAL = "Social"
    EMAIL = "Email"
    DIRECT = "Direct"
    REFERRAL = "Referral"
    OTHER = "Other"


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid4())


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Raises:
        ValueError: If the value is not a datetime or ISO-8601 string.
    """
    if isinstance(value, datetime):
        timestamp = value
    elif isinstance(value, str):
        try:
            timestamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid {field_name} format: {value}") from e
    else:
        raise ValueError(f"Invalid {field_name}: {value!r}")

    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


def parse_date(value: Any, field_name: str = "date") -> date:
    """Parse a YYYY-MM-DD string, date or datetime into a date.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as e:
            raise ValueError(f"Invalid {field_name} format: {value}") from e
    raise ValueError(f"Invalid {field_name}: {value!r}")


def _to_float(data: dict[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid {key}: {value}") from e


def _require(data: dict[str, Any], *keys: str) -> None:
    for key in keys:
        if data.get(key) is None:
            raise ValueError(f"Missing required field: {key}")


@dataclass(frozen=True)
class UTMParams:
    """
    UTM tracking parameters attached to a marketing link.

    Immutable: normalization returns a new instance.

    Example:
        params = UTMParams(utm_source="fb", utm_medium="cpc")
        params.get(UTMField.SOURCE)  # "fb"
    """

    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_term: str | None = None
    utm_content: str | None = None

    def get(self, utm_field: UTMField | str) -> str | None:
        """Return the value of a UTM field."""
        return getattr(self, UTMField(utm_field).value)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary, omitting absent fields."""
        return {
            utm_field.value: value
            for utm_field in UTMField
            if (value := getattr(self, utm_field.value))
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> UTMParams:
        """Create UTMParams from a dictionary of ``utm_*`` keys.

        Unknown keys are ignored; non-string values are converted to strings.
        """
        data = data or {}
        values: dict[str, str | None] = {}
        for utm_field in UTMField:
            value = data.get(utm_field.value)
            values[utm_field.value] = None if value is None else str(value)
        return cls(**values)


@dataclass(frozen=True)
class NormalizationRule:
    """Rewrite rule applied to one UTM field during normalization."""

    field: UTMField
    match_type: MatchType
    match_value: str
    normalized_value: str
    priority: int = 0
    is_active: bool = True
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "field": self.field.value,
            "match_type": self.match_type.value,
            "match_value": self.match_value,
            "normalized_value": self.normalized_value,
            "priority": self.priority,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NormalizationRule:
        """Create NormalizationRule from dictionary.

        Raises:
            ValueError: If a required field is missing or an enum value is unknown.
        """
        _require(data, "field", "match_type", "match_value", "normalized_value")
        return cls(
            id=data.get("id") or new_id(),
            field=UTMField(data["field"]),
            match_type=MatchType(data["match_type"]),
            match_value=str(data["match_value"]),
            normalized_value=str(data["normalized_value"]),
            priority=int(data.get("priority", 0)),
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class SourceMapping:
    """
    Maps a UTM source (and optionally medium) pattern to a channel.

    Patterns may contain ``*`` wildcards, e.g. ``utm_source="*google*"``.
    """

    utm_source: str
    source: str
    source_detail: str
    channel: str
    utm_medium: str | None = None
    priority: int = 0
    is_active: bool = True
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "utm_source": self.utm_source,
            "utm_medium": self.utm_medium,
            "source": self.source,
            "source_detail": self.source_detail,
            "channel": self.channel,
            "priority": self.priority,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceMapping:
        """Create SourceMapping from dictionary.

        Raises:
            ValueError: If a required field is missing.
        """
        _require(data, "utm_source", "source", "source_detail", "channel")
        return cls(
            id=data.get("id") or new_id(),
            utm_source=str(data["utm_source"]),
            utm_medium=data.get("utm_medium") or None,
            source=str(data["source"]),
            source_detail=str(data["source_detail"]),
            channel=str(data["channel"]),
            priority=int(data.get("priority", 0)),
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class UTMRecord:
    """
    A single recorded touchpoint.

    Created once at ingestion and treated as append-only afterwards.
    """

    original_params: UTMParams
    normalized_params: UTMParams
    source: str
    source_detail: str
    channel: str
    timestamp: datetime
    contact_id: str | None = None
    deal_id: str | None = None
    revenue: float = 0.0
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "contact_id": self.contact_id,
            "deal_id": self.deal_id,
            "original_params": self.original_params.to_dict(),
            "normalized_params": self.normalized_params.to_dict(),
            "source": self.source,
            "source_detail": self.source_detail,
            "channel": self.channel,
            "timestamp": self.timestamp.isoformat(),
            "revenue": self.revenue,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UTMRecord:
        """Create UTMRecord from dictionary.

        Raises:
            ValueError: If a required field is missing or a value cannot be parsed.
        """
        _require(data, "source", "source_detail", "channel", "timestamp")
        return cls(
            id=data.get("id") or new_id(),
            contact_id=data.get("contact_id"),
            deal_id=data.get("deal_id"),
            original_params=UTMParams.from_dict(data.get("original_params")),
            normalized_params=UTMParams.from_dict(data.get("normalized_params")),
            source=data["source"],
            source_detail=data["source_detail"],
            channel=data["channel"],
            timestamp=parse_timestamp(data["timestamp"]),
            revenue=_to_float(data, "revenue"),
        )


@dataclass(frozen=True)
class AttributionEvent:
    """
    Credit assigned to one touchpoint for a conversion.

    ``revenue`` holds the full conversion revenue; consumers weight it by
    ``attribution_weight``.
    """

    contact_id: str
    utm_record_id: str
    channel: str
    source: str
    source_detail: str
    attribution_model: AttributionModel
    attribution_weight: float
    timestamp: datetime
    revenue: float = 0.0
    deal_id: str | None = None
    id: str = field(default_factory=new_id)

    @property
    def weighted_revenue(self) -> float:
        """Revenue credited to this touchpoint."""
        return self.revenue * self.attribution_weight

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "contact_id": self.contact_id,
            "deal_id": self.deal_id,
            "utm_record_id": self.utm_record_id,
            "channel": self.channel,
            "source": self.source,
            "source_detail": self.source_detail,
            "attribution_model": self.attribution_model.value,
            "attribution_weight": self.attribution_weight,
            "revenue": self.revenue,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttributionEvent:
        """Create AttributionEvent from dictionary.

        Raises:
            ValueError: If a required field is missing, the weight is outside
                [0, 1], or a value cannot be parsed.
        """
        _require(
            data,
            "contact_id",
            "utm_record_id",
            "channel",
            "source",
            "source_detail",
            "attribution_model",
            "attribution_weight",
            "timestamp",
        )
        weight = _to_float(data, "attribution_weight")
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"Invalid attribution_weight: {weight}")

        return cls(
            id=data.get("id") or new_id(),
            contact_id=data["contact_id"],
            deal_id=data.get("deal_id"),
            utm_record_id=data["utm_record_id"],
            channel=data["channel"],
            source=data["source"],
            source_detail=data["source_detail"],
            attribution_model=AttributionModel(data["attribution_model"]),
            attribution_weight=weight,
            revenue=_to_float(data, "revenue"),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class ChannelCost:
    """Spend for a channel over an inclusive date range."""

    channel: str
    cost: float
    period: CostPeriod
    start_date: date
    end_date: date
    source: str | None = None
    source_detail: str | None = None
    currency: str = "USD"
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "channel": self.channel,
            "source": self.source,
            "source_detail": self.source_detail,
            "cost": self.cost,
            "period": self.period.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelCost:
        """Create ChannelCost from dictionary.

        Raises:
            ValueError: If a required field is missing or a value cannot be parsed.
        """
        _require(data, "channel", "cost", "period", "start_date", "end_date")
        return cls(
            id=data.get("id") or new_id(),
            channel=data["channel"],
            source=data.get("source"),
            source_detail=data.get("source_detail"),
            cost=_to_float(data, "cost"),
            period=CostPeriod(data["period"]),
            start_date=parse_date(data["start_date"], "start_date"),
            end_date=parse_date(data["end_date"], "end_date"),
            currency=data.get("currency") or "USD",
        )


@dataclass(frozen=True)
class MetricsFilter:
    """Time window and optional dimensions for metrics queries.

    Both bounds are inclusive; ``end_date`` covers the whole day.
    """

    start_date: date
    end_date: date
    channel: str | None = None
    source: str | None = None
    source_detail: str | None = None

    def for_channel(self, channel: str) -> MetricsFilter:
        """Return a copy of this filter restricted to one channel."""
        return MetricsFilter(
            start_date=self.start_date,
            end_date=self.end_date,
            channel=channel,
            source=self.source,
            source_detail=self.source_detail,
        )


@dataclass
class ChannelMetrics:
    """Derived CAC / ROI / ROAS figures for one channel over a period."""

    channel: str
    period_start: date
    period_end: date
    total_cost: float
    total_revenue: float
    conversions: float
    cac: float
    roi: float
    roas: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "channel": self.channel,
            "period": {
                "start": self.period_start.isoformat(),
                "end": self.period_end.isoformat(),
            },
            "total_cost": self.total_cost,
            "total_revenue": self.total_revenue,
            "conversions": self.conversions,
            "cac": self.cac,
            "roi": self.roi,
            "roas": self.roas,
        }


@dataclass
class OverallMetrics:
    """Unfiltered totals over a period."""

    total_cac: float
    average_roi: float
    total_revenue: float
    total_cost: float
    total_conversions: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class TouchpointSummary:
    """Touchpoint as shown on contact views."""

    channel: str
    source: str
    source_detail: str
    timestamp: datetime
    utm_campaign: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "channel": self.channel,
            "source": self.source,
            "source_detail": self.source_detail,
            "timestamp": self.timestamp.isoformat(),
            "utm_campaign": self.utm_campaign,
        }


@dataclass
class ContactMetrics:
    """Touchpoints and attributed figures for one contact."""

    contact_id: str
    touchpoints: list[TouchpointSummary] = field(default_factory=list)
    attributed_revenue: float = 0.0
    attributed_cac: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "contact_id": self.contact_id,
            "touchpoints": [tp.to_dict() for tp in self.touchpoints],
            "attributed_revenue": self.attributed_revenue,
            "attributed_cac": self.attributed_cac,
        }
