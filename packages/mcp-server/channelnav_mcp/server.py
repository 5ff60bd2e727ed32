"""
ChannelNav MCP Server - Main entry point.

MCP server exposing the ChannelNav attribution platform:
- UTM ingestion (single and batch) and touchpoint lookup
- Normalization rule, source mapping and channel cost management
- Multi-touch attribution and CAC / ROI / ROAS metrics
- HubSpot CRM card payloads, detail view and contact sync
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from channelnav.connectors import ConnectorError, HubSpotConfig, HubSpotContactSync
from channelnav.reporting import HTMLRenderer, build_crm_card, build_crm_card_data
from channelnav.reporting.html import DETAILS_TEMPLATE
from channelnav.tracking import (
    AttributionCalculator,
    ChannelCost,
    InMemoryTrackingStore,
    IngestRequest,
    MetricsAggregator,
    NormalizationRule,
    SourceMapper,
    SourceMapping,
    TrackingConfig,
    TrackingStore,
    UTMIngestionService,
    UTMNormalizer,
)
from channelnav.tracking.attribution import utc_now
from channelnav.tracking.schema import MetricsFilter, parse_date
from fastmcp import FastMCP

logger = logging.getLogger(__name__)

# Initialize server
mcp = FastMCP(
    "ChannelNav Attribution",
    instructions=(
        "Track UTM touchpoints, attribute revenue to marketing channels and "
        "report CAC, ROI and ROAS. Ingest touchpoints with ingest_utm, credit "
        "conversions with create_attribution, then read metrics."
    ),
)


# =============================================================================
# Composition root
# =============================================================================


@dataclass
class Services:
    """Components wired around a single store."""

    store: TrackingStore
    config: TrackingConfig
    hubspot_config: HubSpotConfig
    normalizer: UTMNormalizer
    mapper: SourceMapper
    calculator: AttributionCalculator
    aggregator: MetricsAggregator
    ingestion: UTMIngestionService
    hubspot: HubSpotContactSync
    renderer: HTMLRenderer
    clock: Callable[[], datetime]

    def today(self) -> date:
        return self.clock().date()


def build_services(
    store: TrackingStore | None = None,
    config: TrackingConfig | None = None,
    hubspot_config: HubSpotConfig | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Services:
    """
    Wire the tracking, reporting and connector components.

    Args:
        store: Tracking store (default: a new in-memory store)
        config: Tracking settings (default: from environment)
        hubspot_config: HubSpot settings (default: from environment)
        clock: Source of the current time (default: UTC now)

    Returns:
        Services sharing one store. Contact sync runs after each ingestion
        only when a HubSpot token is configured.
    """
    store = store if store is not None else InMemoryTrackingStore()
    config = config if config is not None else TrackingConfig.from_env()
    hubspot_config = hubspot_config if hubspot_config is not None else HubSpotConfig.from_env()
    clock = clock or utc_now

    if config.seed_defaults:
        store.seed_defaults()

    normalizer = UTMNormalizer(store)
    mapper = SourceMapper(store)
    aggregator = MetricsAggregator(store)
    hubspot = HubSpotContactSync(hubspot_config, aggregator)

    ingestion = UTMIngestionService(
        store,
        normalizer=normalizer,
        mapper=mapper,
        on_contact_updated=hubspot.sync_contact_properties if hubspot.is_configured else None,
        clock=clock,
    )

    return Services(
        store=store,
        config=config,
        hubspot_config=hubspot_config,
        normalizer=normalizer,
        mapper=mapper,
        calculator=AttributionCalculator(store, clock=clock),
        aggregator=aggregator,
        ingestion=ingestion,
        hubspot=hubspot,
        renderer=HTMLRenderer(),
        clock=clock,
    )


_services: Services | None = None


def get_services() -> Services:
    """Return the server's services, building them on first use."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def configure(**kwargs: Any) -> Services:
    """Replace the server's services (see build_services for arguments)."""
    global _services
    _services = build_services(**kwargs)
    return _services


_SENSITIVE_PATTERN = re.compile(
    r"""["']?(password|token|api[_-]key|secret)["']?\s*[:=]\s*["']?[^\s"',}]+["']?""",
    re.IGNORECASE,
)


def _sanitize_error(message: str) -> str:
    """Mask credential values in an error message."""
    return _SENSITIVE_PATTERN.sub(
        lambda m: f"{m.group(1).lower().replace('-', '_')}=***", message
    )


def _not_found(kind: str, entity_id: str) -> dict:
    return {"success": False, "error": f"{kind} not found: {entity_id}"}


def _period(
    start_date: str | None,
    end_date: str | None,
    services: Services,
) -> tuple[date, date]:
    """Resolve a reporting period, defaulting to the configured window ending today."""
    end = parse_date(end_date, "end_date") if end_date else services.today()
    if start_date:
        start = parse_date(start_date, "start_date")
    else:
        start = end - timedelta(days=services.config.report_window_days)
    return start, end


# =============================================================================
# UTM Ingestion Tools
# =============================================================================


@mcp.tool()
def ingest_utm(
    params: dict,
    contact_id: str | None = None,
    deal_id: str | None = None,
    timestamp: str | None = None,
    revenue: float = 0.0,
) -> dict:
    """
    Record a UTM touchpoint.

    The parameters are cleaned, normalized with the active rules and mapped to
    a source, source detail and channel. Validation issues are advisory and
    returned alongside the stored record.

    Args:
        params: UTM parameters (utm_source, utm_medium, utm_campaign, ...)
        contact_id: CRM contact the touchpoint belongs to
        deal_id: CRM deal the touchpoint belongs to
        timestamp: ISO-8601 time of the touch (default: now)
        revenue: Revenue associated with the touch

    Returns:
        The stored record and any validation issues
    """
    services = get_services()
    try:
        request = IngestRequest.from_dict(
            {
                "params": params,
                "contact_id": contact_id,
                "deal_id": deal_id,
                "timestamp": timestamp,
                "revenue": revenue,
            }
        )
        result = services.ingestion.ingest(request)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    return {"success": True, **result.to_dict()}


@mcp.tool()
def ingest_utm_batch(records: list[dict]) -> dict:
    """
    Record many UTM touchpoints at once.

    Each row holds ``params`` (or flat ``utm_*`` keys) plus optional
    ``contact_id``, ``deal_id``, ``timestamp`` and ``revenue``. Rows that fail
    are reported by index and do not stop the batch.

    Args:
        records: Touchpoint rows

    Returns:
        Stored records, their count and per-row errors
    """
    if not records:
        return {"success": False, "error": "records must be a non-empty list"}

    result = get_services().ingestion.ingest_batch(records)
    return {"success": True, **result.to_dict()}


@mcp.tool()
def list_utm_records(contact_id: str | None = None, channel: str | None = None) -> dict:
    """
    List recorded touchpoints.

    Args:
        contact_id: Only this contact's touchpoints, oldest first
        channel: Only touchpoints classified into this channel

    Returns:
        Records and count
    """
    store = get_services().store
    if contact_id:
        records = store.list_utm_records_by_contact(contact_id)
    elif channel:
        records = store.list_utm_records_by_channel(channel)
    else:
        records = store.list_utm_records()

    return {
        "success": True,
        "records": [r.to_dict() for r in records],
        "count": len(records),
    }


@mcp.tool()
def get_utm_record(record_id: str) -> dict:
    """Get one touchpoint by ID."""
    record = get_services().store.get_utm_record(record_id)
    if record is None:
        return _not_found("UTM record", record_id)
    return {"success": True, "record": record.to_dict()}


# =============================================================================
# Normalization Rule Tools
# =============================================================================


@mcp.tool()
def create_normalization_rule(
    field: str,
    match_type: str,
    match_value: str,
    normalized_value: str,
    priority: int = 0,
    is_active: bool = True,
) -> dict:
    """
    Create a rule that rewrites a UTM field during normalization.

    Args:
        field: UTM field (utm_source, utm_medium, utm_campaign, utm_term, utm_content)
        match_type: exact, contains, startsWith, endsWith or regex
        match_value: Value or pattern to match (case-insensitive)
        normalized_value: Replacement value
        priority: Higher priorities are applied first
        is_active: Whether the rule is applied

    Returns:
        The created rule
    """
    try:
        rule = NormalizationRule.from_dict(
            {
                "field": field,
                "match_type": match_type,
                "match_value": match_value,
                "normalized_value": normalized_value,
                "priority": priority,
                "is_active": is_active,
            }
        )
    except ValueError as e:
        return {"success": False, "error": str(e)}

    get_services().store.add_normalization_rule(rule)
    logger.info(f"Created normalization rule {rule.id}")
    return {"success": True, "rule": rule.to_dict()}


@mcp.tool()
def list_normalization_rules(include_inactive: bool = False) -> dict:
    """List normalization rules in priority order."""
    rules = get_services().store.list_normalization_rules(active_only=not include_inactive)
    return {"success": True, "rules": [r.to_dict() for r in rules], "count": len(rules)}


@mcp.tool()
def get_normalization_rule(rule_id: str) -> dict:
    """Get one normalization rule by ID."""
    rule = get_services().store.get_normalization_rule(rule_id)
    if rule is None:
        return _not_found("Normalization rule", rule_id)
    return {"success": True, "rule": rule.to_dict()}


@mcp.tool()
def update_normalization_rule(rule_id: str, updates: dict) -> dict:
    """
    Update fields of a normalization rule.

    Args:
        rule_id: Rule to update
        updates: Fields to change, e.g. {"priority": 20, "is_active": false}

    Returns:
        The updated rule
    """
    store = get_services().store
    current = store.get_normalization_rule(rule_id)
    if current is None:
        return _not_found("Normalization rule", rule_id)

    try:
        merged = NormalizationRule.from_dict({**current.to_dict(), **updates})
        rule = store.update_normalization_rule(
            rule_id, **{key: getattr(merged, key) for key in updates}
        )
    except (ValueError, TypeError, AttributeError) as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "rule": rule.to_dict()}


@mcp.tool()
def delete_normalization_rule(rule_id: str) -> dict:
    """Delete a normalization rule."""
    if not get_services().store.delete_normalization_rule(rule_id):
        return _not_found("Normalization rule", rule_id)
    return {"success": True, "deleted": rule_id}


# =============================================================================
# Source Mapping Tools
# =============================================================================


@mcp.tool()
def create_source_mapping(
    utm_source: str,
    source: str,
    source_detail: str,
    channel: str,
    utm_medium: str | None = None,
    priority: int = 0,
    is_active: bool = True,
) -> dict:
    """
    Create a mapping from a UTM source/medium pattern to a channel.

    Args:
        utm_source: Source pattern; ``*`` matches any characters
        source: Display source, e.g. "Google Ads"
        source_detail: Display detail, e.g. "Search"
        channel: Channel name, e.g. "Paid Search"
        utm_medium: Optional medium pattern
        priority: Higher priorities are tried first
        is_active: Whether the mapping is used

    Returns:
        The created mapping
    """
    try:
        mapping = SourceMapping.from_dict(
            {
                "utm_source": utm_source,
                "utm_medium": utm_medium,
                "source": source,
                "source_detail": source_detail,
                "channel": channel,
                "priority": priority,
                "is_active": is_active,
            }
        )
    except ValueError as e:
        return {"success": False, "error": str(e)}

    get_services().store.add_source_mapping(mapping)
    logger.info(f"Created source mapping {mapping.id} -> {mapping.channel}")
    return {"success": True, "mapping": mapping.to_dict()}


@mcp.tool()
def list_source_mappings(include_inactive: bool = False) -> dict:
    """List source mappings in priority order."""
    mappings = get_services().store.list_source_mappings(active_only=not include_inactive)
    return {
        "success": True,
        "mappings": [m.to_dict() for m in mappings],
        "count": len(mappings),
    }


@mcp.tool()
def get_source_mapping(mapping_id: str) -> dict:
    """Get one source mapping by ID."""
    mapping = get_services().store.get_source_mapping(mapping_id)
    if mapping is None:
        return _not_found("Source mapping", mapping_id)
    return {"success": True, "mapping": mapping.to_dict()}


@mcp.tool()
def update_source_mapping(mapping_id: str, updates: dict) -> dict:
    """Update fields of a source mapping."""
    store = get_services().store
    current = store.get_source_mapping(mapping_id)
    if current is None:
        return _not_found("Source mapping", mapping_id)

    try:
        merged = SourceMapping.from_dict({**current.to_dict(), **updates})
        mapping = store.update_source_mapping(
            mapping_id, **{key: getattr(merged, key) for key in updates}
        )
    except (ValueError, TypeError, AttributeError) as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "mapping": mapping.to_dict()}


@mcp.tool()
def delete_source_mapping(mapping_id: str) -> dict:
    """Delete a source mapping."""
    if not get_services().store.delete_source_mapping(mapping_id):
        return _not_found("Source mapping", mapping_id)
    return {"success": True, "deleted": mapping_id}


@mcp.tool()
def list_channels() -> dict:
    """List known channels: mapped channels plus the default taxonomy."""
    channels = get_services().mapper.available_channels()
    return {"success": True, "channels": channels, "count": len(channels)}


# =============================================================================
# Channel Cost Tools
# =============================================================================


@mcp.tool()
def create_channel_cost(
    channel: str,
    cost: float,
    period: str,
    start_date: str,
    end_date: str,
    source: str | None = None,
    source_detail: str | None = None,
    currency: str | None = None,
) -> dict:
    """
    Record spend for a channel over an inclusive date range.

    Args:
        channel: Channel name
        cost: Amount spent
        period: daily, weekly or monthly
        start_date: First day (YYYY-MM-DD)
        end_date: Last day (YYYY-MM-DD)
        source: Optional source the spend belongs to
        source_detail: Optional source detail
        currency: Currency code (default: configured currency)

    Returns:
        The created cost entry
    """
    services = get_services()
    try:
        entry = ChannelCost.from_dict(
            {
                "channel": channel,
                "cost": cost,
                "period": period,
                "start_date": start_date,
                "end_date": end_date,
                "source": source,
                "source_detail": source_detail,
                "currency": currency or services.config.currency,
            }
        )
    except ValueError as e:
        return {"success": False, "error": str(e)}

    services.store.add_channel_cost(entry)
    logger.info(f"Recorded {entry.cost:.2f} {entry.currency} for {entry.channel}")
    return {"success": True, "cost": entry.to_dict()}


@mcp.tool()
def create_channel_costs_batch(costs: list[dict]) -> dict:
    """
    Record many cost entries.

    Entries that fail to parse are reported by index; the rest are stored.

    Args:
        costs: Cost entries with the same fields as create_channel_cost

    Returns:
        Created entries, their count and per-entry errors
    """
    services = get_services()
    created: list[dict] = []
    errors: list[dict] = []

    for index, data in enumerate(costs):
        try:
            entry = ChannelCost.from_dict({"currency": services.config.currency, **data})
        except (ValueError, TypeError) as e:
            errors.append({"index": index, "error": str(e)})
            continue
        services.store.add_channel_cost(entry)
        created.append(entry.to_dict())

    if errors:
        logger.warning(f"{len(errors)} of {len(costs)} channel costs failed to parse")

    return {"success": True, "costs": created, "count": len(created), "errors": errors}


@mcp.tool()
def list_channel_costs(
    channel: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict:
    """
    List channel cost entries.

    Args:
        channel: Only entries for this channel
        start_date: With end_date, only entries lying entirely inside the range
        end_date: See start_date

    Returns:
        Cost entries and count
    """
    store = get_services().store
    try:
        if channel:
            costs = store.list_channel_costs_by_channel(channel)
        elif start_date and end_date:
            costs = store.list_channel_costs_in_range(
                parse_date(start_date, "start_date"), parse_date(end_date, "end_date")
            )
        else:
            costs = store.list_channel_costs()
    except ValueError as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "costs": [c.to_dict() for c in costs], "count": len(costs)}


@mcp.tool()
def get_channel_cost(cost_id: str) -> dict:
    """Get one channel cost entry by ID."""
    entry = get_services().store.get_channel_cost(cost_id)
    if entry is None:
        return _not_found("Channel cost", cost_id)
    return {"success": True, "cost": entry.to_dict()}


@mcp.tool()
def update_channel_cost(cost_id: str, updates: dict) -> dict:
    """Update fields of a channel cost entry."""
    store = get_services().store
    current = store.get_channel_cost(cost_id)
    if current is None:
        return _not_found("Channel cost", cost_id)

    try:
        merged = ChannelCost.from_dict({**current.to_dict(), **updates})
        entry = store.update_channel_cost(
            cost_id, **{key: getattr(merged, key) for key in updates}
        )
    except (ValueError, TypeError, AttributeError) as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "cost": entry.to_dict()}


@mcp.tool()
def delete_channel_cost(cost_id: str) -> dict:
    """Delete a channel cost entry."""
    if not get_services().store.delete_channel_cost(cost_id):
        return _not_found("Channel cost", cost_id)
    return {"success": True, "deleted": cost_id}


# =============================================================================
# Attribution Tools
# =============================================================================


@mcp.tool()
def create_attribution(
    contact_id: str,
    revenue: float,
    deal_id: str | None = None,
    model: str | None = None,
    time_decay_half_life_days: float | None = None,
) -> dict:
    """
    Credit a conversion to the contact's touchpoints.

    Args:
        contact_id: Contact that converted
        revenue: Conversion revenue
        deal_id: Optional deal ID
        model: first_touch, last_touch, linear or time_decay (default: configured)
        time_decay_half_life_days: Half-life for time_decay (default: configured)

    Returns:
        Created attribution events and count (empty when the contact has no touchpoints)
    """
    services = get_services()
    try:
        config = services.config.attribution_config(model, time_decay_half_life_days)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    events = services.calculator.create_attribution(contact_id, deal_id, revenue, config)
    return {
        "success": True,
        "events": [e.to_dict() for e in events],
        "count": len(events),
    }


@mcp.tool()
def get_contact_attribution(contact_id: str) -> dict:
    """Get all attribution events for a contact."""
    events = get_services().calculator.get_contact_attribution(contact_id)
    return {
        "success": True,
        "contact_id": contact_id,
        "events": [e.to_dict() for e in events],
        "count": len(events),
    }


@mcp.tool()
def append_recalculated_attribution(
    contact_id: str,
    model: str,
    time_decay_half_life_days: float | None = None,
) -> dict:
    """
    Attribute the contact's implied revenue again under another model.

    Existing events are kept; the new events are added alongside them, so
    revenue totals include both sets.

    Args:
        contact_id: Contact to recalculate
        model: Attribution model for the new events
        time_decay_half_life_days: Half-life for time_decay

    Returns:
        The newly created events and count
    """
    services = get_services()
    try:
        config = services.config.attribution_config(model, time_decay_half_life_days)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    events = services.calculator.append_recalculated_attribution(contact_id, config)
    return {
        "success": True,
        "events": [e.to_dict() for e in events],
        "count": len(events),
    }


# =============================================================================
# Metrics Tools
# =============================================================================


@mcp.tool()
def get_overall_metrics(start_date: str | None = None, end_date: str | None = None) -> dict:
    """
    Get overall and per-channel metrics for a period.

    Args:
        start_date: First day (default: the reporting window before end_date)
        end_date: Last day, inclusive (default: today)

    Returns:
        Period, overall totals and channel metrics
    """
    services = get_services()
    try:
        start, end = _period(start_date, end_date, services)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    return {
        "success": True,
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "overall": services.aggregator.overall_metrics(start, end).to_dict(),
        "channels": [m.to_dict() for m in services.aggregator.channel_metrics(start, end)],
    }


@mcp.tool()
def get_channel_metrics(
    channel: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict:
    """Get CAC, ROI and ROAS for one channel over a period."""
    services = get_services()
    try:
        start, end = _period(start_date, end_date, services)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    filters = MetricsFilter(start_date=start, end_date=end, channel=channel)
    aggregator = services.aggregator
    return {
        "success": True,
        "channel": channel,
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "metrics": {
            "cac": aggregator.calculate_cac(filters),
            "roi": aggregator.calculate_roi(filters),
            "roas": aggregator.calculate_roas(filters),
        },
    }


@mcp.tool()
def get_contact_metrics(contact_id: str) -> dict:
    """Get a contact's touchpoints, attributed revenue and attributed CAC."""
    metrics = get_services().aggregator.contact_metrics(contact_id)
    return {"success": True, **metrics.to_dict()}


# =============================================================================
# CRM Card Tools
# =============================================================================


@mcp.tool()
def get_crm_card(contact_id: str) -> dict:
    """
    Build the HubSpot CRM card for a contact.

    Returns:
        Card JSON with ``results`` sections and the detail-view ``primaryAction``
    """
    services = get_services()
    data = build_crm_card_data(
        contact_id,
        services.aggregator,
        window_days=services.config.report_window_days,
        today=services.today(),
    )
    return build_crm_card(
        data,
        card_base_url=services.hubspot_config.card_base_url,
        currency=services.config.currency,
    )


@mcp.tool()
def get_crm_card_details_html(contact_id: str) -> str:
    """Render the attribution detail view shown in the CRM card iframe."""
    services = get_services()
    data = build_crm_card_data(
        contact_id,
        services.aggregator,
        window_days=services.config.report_window_days,
        today=services.today(),
    )
    return services.renderer.render(DETAILS_TEMPLATE, data.to_dict())


# =============================================================================
# HubSpot Tools
# =============================================================================


@mcp.tool()
def sync_hubspot_contact(contact_id: str) -> dict:
    """
    Push a contact's attribution properties to HubSpot.

    Args:
        contact_id: HubSpot contact ID

    Returns:
        The properties written
    """
    hubspot = get_services().hubspot
    try:
        properties = hubspot.sync_contact_properties(contact_id)
    except (ConnectorError, ImportError) as e:
        logger.exception(
            "HubSpot contact sync failed",
            extra={"contact_id": contact_id},
        )
        return {"success": False, "error": _sanitize_error(str(e))}

    return {"success": True, "contact_id": contact_id, "properties": properties}


@mcp.tool()
def setup_hubspot_properties() -> dict:
    """
    Create the UTM tracking property group and contact properties in HubSpot.

    Properties that already exist are reported as skipped.
    """
    hubspot = get_services().hubspot
    try:
        result = hubspot.create_utm_properties()
    except (ConnectorError, ImportError) as e:
        logger.exception("HubSpot property setup failed")
        return {"success": False, "error": _sanitize_error(str(e))}

    return {"success": True, **result}


# =============================================================================
# Resources
# =============================================================================


@mcp.resource("channels://list")
def channels_resource() -> str:
    """List known marketing channels."""
    return "\n".join(f"- {c}" for c in get_services().mapper.available_channels())


@mcp.resource("contact://{contact_id}")
def contact_resource(contact_id: str) -> str:
    """Summarize a contact's touchpoints and attribution as a resource."""
    metrics = get_services().aggregator.contact_metrics(contact_id)
    if not metrics.touchpoints:
        return f"Contact {contact_id} has no recorded touchpoints"

    journey = "\n".join(
        f"- {tp.timestamp:%Y-%m-%d} {tp.channel} ({tp.source}"
        f"{', ' + tp.utm_campaign if tp.utm_campaign else ''})"
        for tp in metrics.touchpoints
    )
    return f"""Contact: {contact_id}
Touchpoints: {len(metrics.touchpoints)}
Attributed revenue: {metrics.attributed_revenue:.2f}
Attributed CAC: {metrics.attributed_cac:.2f}

Journey:
{journey}
"""



# =============================================================================
# Prompts
# =============================================================================


@mcp.prompt()
def analyze_channel_performance(period_days: int = 30) -> str:
    """
    Prompt for reviewing channel performance.

    Args:
        period_days: Length of the period to review
    """
    return f"""Review marketing channel performance for the last {period_days} days.

Steps:
1. Call get_overall_metrics for the period to get totals and per-channel figures
2. Rank channels by ROAS and by CAC
3. Call list_channel_costs to check for channels with spend but no conversions
4. Summarize which channels to scale, hold or cut

Include:
- Overall CAC, ROI and ROAS
- Best and worst channels with their figures
- Channels whose cost entries may be missing or incomplete
"""


@mcp.prompt()
def compare_attribution_models(contact_id: str) -> str:
    """Prompt for comparing attribution models on one contact."""
    return f"""Compare attribution models for contact "{contact_id}".

Steps:
1. Call get_contact_metrics("{contact_id}") to see the touchpoint journey
2. Call get_contact_attribution("{contact_id}") to see the current credit split
3. Explain how first_touch, last_touch, linear and time_decay would split credit
   across these touchpoints
4. Recommend a model for this kind of journey

Note: append_recalculated_attribution adds events rather than replacing them,
so only run it when the extra events are wanted.
"""



# =============================================================================
# Entry Point
# =============================================================================


def main():
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
