"""Tests for the tracking schema."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from channelnav.tracking.schema import (
    AttributionEvent,
    AttributionModel,
    ChannelCost,
    ChannelMetrics,
    CostPeriod,
    MatchType,
    MetricsFilter,
    NormalizationRule,
    SourceMapping,
    UTMField,
    UTMParams,
    UTMRecord,
    parse_date,
    parse_timestamp,
)


class TestUTMParams:
    """Test UTMParams dataclass."""

    def test_get_by_field(self):
        """Test reading a value by UTMField or its string name."""
        params = UTMParams(utm_source="fb", utm_medium="cpc")

        assert params.get(UTMField.SOURCE) == "fb"
        assert params.get("utm_medium") == "cpc"
        assert params.get(UTMField.CAMPAIGN) is None

    def test_to_dict_omits_absent_fields(self):
        """Test that to_dict only includes present values."""
        params = UTMParams(utm_source="google", utm_campaign="spring")

        assert params.to_dict() == {"utm_source": "google", "utm_campaign": "spring"}

    def test_from_dict_ignores_unknown_keys(self):
        """Test that non-UTM keys are dropped."""
        params = UTMParams.from_dict({"utm_source": "google", "gclid": "abc"})

        assert params == UTMParams(utm_source="google")

    def test_from_dict_none(self):
        """Test that None produces empty params."""
        assert UTMParams.from_dict(None) == UTMParams()

    def test_immutable(self):
        """Test that UTMParams cannot be mutated."""
        params = UTMParams(utm_source="google")

        with pytest.raises(AttributeError):
            params.utm_source = "bing"  # type: ignore[misc]


class TestParsing:
    """Test timestamp and date parsing helpers."""

    def test_parse_timestamp_z_suffix(self):
        """Test ISO string with Z suffix."""
        result = parse_timestamp("2024-01-15T10:30:00Z")

        assert result == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    def test_parse_timestamp_naive_is_utc(self):
        """Test naive datetimes are interpreted as UTC."""
        result = parse_timestamp(datetime(2024, 1, 15))

        assert result.tzinfo == UTC

    def test_parse_timestamp_converts_offset(self):
        """Test offset datetimes are converted to UTC."""
        eastern = timezone(timedelta(hours=-5))
        result = parse_timestamp(datetime(2024, 1, 15, 10, tzinfo=eastern))

        assert result == datetime(2024, 1, 15, 15, tzinfo=UTC)

    def test_parse_timestamp_invalid(self):
        """Test invalid timestamps raise ValueError."""
        with pytest.raises(ValueError, match="Invalid timestamp format"):
            parse_timestamp("not-a-date")

        with pytest.raises(ValueError, match="Invalid timestamp"):
            parse_timestamp(12345)

    def test_parse_date(self):
        """Test date parsing from strings and datetimes."""
        assert parse_date("2024-01-31") == date(2024, 1, 31)
        assert parse_date("2024-01-31T12:00:00Z") == date(2024, 1, 31)
        assert parse_date(datetime(2024, 1, 31, 12)) == date(2024, 1, 31)

    def test_parse_date_invalid(self):
        """Test invalid dates raise ValueError."""
        with pytest.raises(ValueError, match="Invalid start_date format"):
            parse_date("31/01/2024", "start_date")


class TestNormalizationRule:
    """Test NormalizationRule dataclass."""

    def test_from_dict(self):
        """Test creating a rule from a dictionary."""
        rule = NormalizationRule.from_dict(
            {
                "field": "utm_source",
                "match_type": "startsWith",
                "match_value": "goog",
                "normalized_value": "google",
                "priority": 5,
            }
        )

        assert rule.field == UTMField.SOURCE
        assert rule.match_type == MatchType.STARTS_WITH
        assert rule.priority == 5
        assert rule.is_active is True
        assert rule.id

    def test_from_dict_missing_field(self):
        """Test missing required fields raise ValueError."""
        with pytest.raises(ValueError, match="Missing required field: normalized_value"):
            NormalizationRule.from_dict(
                {"field": "utm_source", "match_type": "exact", "match_value": "fb"}
            )

    def test_from_dict_unknown_match_type(self):
        """Test unknown match types raise ValueError."""
        with pytest.raises(ValueError):
            NormalizationRule.from_dict(
                {
                    "field": "utm_source",
                    "match_type": "fuzzy",
                    "match_value": "fb",
                    "normalized_value": "facebook",
                }
            )

    def test_to_dict_uses_enum_values(self):
        """Test enums serialize to their string values."""
        rule = NormalizationRule(
            id="r-1",
            field=UTMField.MEDIUM,
            match_type=MatchType.EXACT,
            match_value="cpc",
            normalized_value="paid",
        )

        data = rule.to_dict()

        assert data["field"] == "utm_medium"
        assert data["match_type"] == "exact"
        assert data["id"] == "r-1"


class TestSourceMapping:
    """Test SourceMapping dataclass."""

    def test_from_dict_optional_medium(self):
        """Test that an empty medium becomes None."""
        mapping = SourceMapping.from_dict(
            {
                "utm_source": "*google*",
                "utm_medium": "",
                "source": "Google",
                "source_detail": "Any",
                "channel": "Paid Search",
            }
        )

        assert mapping.utm_medium is None
        assert mapping.priority == 0


class TestUTMRecord:
    """Test UTMRecord dataclass."""

    def test_to_dict(self):
        """Test serialization of nested params and timestamp."""
        record = UTMRecord(
            id="utm-1",
            original_params=UTMParams(utm_source="fb"),
            normalized_params=UTMParams(utm_source="facebook"),
            source="Facebook",
            source_detail="Unknown",
            channel="Social",
            timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        )

        data = record.to_dict()

        assert data["original_params"] == {"utm_source": "fb"}
        assert data["normalized_params"] == {"utm_source": "facebook"}
        assert data["timestamp"] == "2024-01-01T00:00:00+00:00"
        assert data["revenue"] == 0.0
        assert data["contact_id"] is None

    def test_from_dict_invalid_revenue(self):
        """Test non-numeric revenue raises ValueError."""
        with pytest.raises(ValueError, match="Invalid revenue"):
            UTMRecord.from_dict(
                {
                    "source": "Google",
                    "source_detail": "Search",
                    "channel": "Paid Search",
                    "timestamp": "2024-01-01T00:00:00Z",
                    "revenue": "lots",
                }
            )


class TestAttributionEvent:
    """Test AttributionEvent dataclass."""

    def _data(self, **overrides):
        data = {
            "contact_id": "contact-1",
            "utm_record_id": "utm-1",
            "channel": "Paid Search",
            "source": "Google Ads",
            "source_detail": "Search",
            "attribution_model": "linear",
            "attribution_weight": 0.5,
            "revenue": 1000,
            "timestamp": "2024-01-15T00:00:00Z",
        }
        data.update(overrides)
        return data

    def test_weighted_revenue(self):
        """Test weighted revenue is revenue times weight."""
        event = AttributionEvent.from_dict(self._data())

        assert event.attribution_model == AttributionModel.LINEAR
        assert event.weighted_revenue == 500.0

    def test_weight_out_of_range(self):
        """Test weights outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="Invalid attribution_weight"):
            AttributionEvent.from_dict(self._data(attribution_weight=1.5))

    def test_round_trip_keeps_id(self):
        """Test to_dict output can be parsed back."""
        event = AttributionEvent.from_dict(self._data(id="event-1"))

        assert AttributionEvent.from_dict(event.to_dict()) == event


class TestChannelCost:
    """Test ChannelCost dataclass."""

    def test_from_dict(self):
        """Test parsing dates, period and currency default."""
        cost = ChannelCost.from_dict(
            {
                "channel": "Paid Search",
                "cost": "1000",
                "period": "monthly",
                "start_date": "2024-01-01",
                "end_date": "2024-01-31",
            }
        )

        assert cost.cost == 1000.0
        assert cost.period == CostPeriod.MONTHLY
        assert cost.start_date == date(2024, 1, 1)
        assert cost.currency == "USD"

    def test_from_dict_unknown_period(self):
        """Test unknown periods raise ValueError."""
        with pytest.raises(ValueError):
            ChannelCost.from_dict(
                {
                    "channel": "Paid Search",
                    "cost": 1000,
                    "period": "yearly",
                    "start_date": "2024-01-01",
                    "end_date": "2024-12-31",
                }
            )


class TestMetricsTypes:
    """Test MetricsFilter and ChannelMetrics."""

    def test_for_channel(self):
        """Test restricting a filter to a channel keeps other fields."""
        base = MetricsFilter(date(2024, 1, 1), date(2024, 1, 31), source="Google Ads")

        scoped = base.for_channel("Paid Search")

        assert scoped.channel == "Paid Search"
        assert scoped.source == "Google Ads"
        assert base.channel is None

    def test_channel_metrics_to_dict(self):
        """Test period is nested in the dictionary form."""
        metrics = ChannelMetrics(
            channel="Email",
            period_start=date(2024, 1, 1),
            period_end=date(2024, 1, 31),
            total_cost=100.0,
            total_revenue=300.0,
            conversions=2.0,
            cac=50.0,
            roi=200.0,
            roas=3.0,
        )

        data = metrics.to_dict()

        assert data["period"] == {"start": "2024-01-01", "end": "2024-01-31"}
        assert data["roas"] == 3.0
