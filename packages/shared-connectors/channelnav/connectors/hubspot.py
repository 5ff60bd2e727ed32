"""HubSpot CRM sync - push attribution properties onto contacts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from channelnav.connectors.config import HubSpotConfig
from channelnav.connectors.exceptions import AuthenticationError, SyncError
from channelnav.tracking.metrics import MetricsAggregator
from channelnav.tracking.schema import ContactMetrics

logger = logging.getLogger(__name__)

OBJECT_TYPE = "contacts"


@dataclass(frozen=True)
class PropertyDefinition:
    """A HubSpot contact property created by ``create_utm_properties``."""

    name: str
    label: str
    type: str
    field_type: str


UTM_PROPERTIES: tuple[PropertyDefinition, ...] = (
    PropertyDefinition("utm_first_touch_source", "First Touch Source", "string", "text"),
    PropertyDefinition("utm_first_touch_channel", "First Touch Channel", "string", "text"),
    PropertyDefinition("utm_first_touch_campaign", "First Touch Campaign", "string", "text"),
    PropertyDefinition("utm_first_touch_date", "First Touch Date", "datetime", "date"),
    PropertyDefinition("utm_last_touch_source", "Last Touch Source", "string", "text"),
    PropertyDefinition("utm_last_touch_channel", "Last Touch Channel", "string", "text"),
    PropertyDefinition("utm_last_touch_campaign", "Last Touch Campaign", "string", "text"),
    PropertyDefinition("utm_last_touch_date", "Last Touch Date", "datetime", "date"),
    PropertyDefinition("total_touchpoints", "Total Touchpoints", "number", "number"),
    PropertyDefinition("attributed_revenue", "Attributed Revenue", "number", "number"),
    PropertyDefinition("attributed_cac", "Attributed CAC", "number", "number"),
)


def build_contact_properties(metrics: ContactMetrics) -> dict[str, str]:
    """
    Build HubSpot contact property values from contact metrics.

    First and last touch properties are only set when the contact has
    touchpoints. Counts and amounts are always set.
    """
    properties: dict[str, str] = {}

    if metrics.touchpoints:
        for prefix, touchpoint in (
            ("utm_first_touch", metrics.touchpoints[0]),
            ("utm_last_touch", metrics.touchpoints[-1]),
        ):
            properties[f"{prefix}_source"] = touchpoint.source
            properties[f"{prefix}_channel"] = touchpoint.channel
            properties[f"{prefix}_campaign"] = touchpoint.utm_campaign or ""
            properties[f"{prefix}_date"] = touchpoint.timestamp.isoformat()

    properties["total_touchpoints"] = str(len(metrics.touchpoints))
    properties["attributed_revenue"] = str(metrics.attributed_revenue)
    properties["attributed_cac"] = f"{metrics.attributed_cac:.2f}"
    return properties


class HubSpotContactSync:
    """
    Sync attribution data to HubSpot contact properties.

    Required configuration:
        - access_token: HubSpot private app access token

    Example:
        sync = HubSpotContactSync(HubSpotConfig.from_env(), MetricsAggregator(store))
        sync.create_utm_properties()
        sync.sync_contact_properties("12345")
    """

    def __init__(self, config: HubSpotConfig, metrics: MetricsAggregator):
        self.config = config
        self.metrics = metrics
        self._client: Any = None

    @property
    def is_configured(self) -> bool:
        """Whether an access token is available."""
        return self.config.is_configured

    @property
    def client(self) -> Any:
        """Lazy initialization of the HubSpot client.

        Raises:
            ImportError: If hubspot-api-client is not installed.
            AuthenticationError: If no token is configured or client creation fails.
        """
        if self._client is None:
            if not self.config.access_token:
                raise AuthenticationError("HubSpot access token is not configured")

            try:
                from hubspot import HubSpot
            except ImportError as e:
                raise ImportError(
                    "hubspot-api-client is required. "
                    "Install with: pip install hubspot-api-client"
                ) from e

            try:
                self._client = HubSpot(access_token=self.config.access_token)
                logger.info("Connected to HubSpot")
            except Exception as e:
                raise AuthenticationError(f"Failed to create HubSpot client: {e}") from e

        return self._client

    def sync_contact_properties(self, contact_id: str) -> dict[str, str]:
        """
        Push the contact's attribution properties to HubSpot.

        Args:
            contact_id: HubSpot contact ID

        Returns:
            The properties that were sent.

        Raises:
            AuthenticationError: If the client cannot be created.
            SyncError: If the HubSpot API call fails.
        """
        client = self.client
        from hubspot.crm.contacts import SimplePublicObjectInput

        properties = build_contact_properties(self.metrics.contact_metrics(contact_id))

        try:
            client.crm.contacts.basic_api.update(
                contact_id,
                simple_public_object_input=SimplePublicObjectInput(properties=properties),
            )
        except Exception as e:
            raise SyncError(f"Failed to sync HubSpot contact {contact_id}: {e}") from e

        logger.info(f"Synced {len(properties)} properties to HubSpot contact {contact_id}")
        return properties

    def create_utm_properties(self) -> dict[str, list[str]]:
        """
        Create the property group and UTM properties on HubSpot contacts.

        Creation failures (typically "already exists") are logged and skipped.

        Returns:
            Names of ``created`` and ``skipped`` properties.
        """
        client = self.client
        from hubspot.crm.properties import PropertyCreate, PropertyGroupCreate

        group = self.config.property_group
        try:
            client.crm.properties.groups_api.create(
                object_type=OBJECT_TYPE,
                property_group_create=PropertyGroupCreate(
                    name=group, label="UTM Tracking", display_order=1
                ),
            )
            logger.info(f"Created HubSpot property group {group}")
        except Exception as e:
            logger.warning(f"Property group {group} might already exist: {e}")

        result: dict[str, list[str]] = {"created": [], "skipped": []}
        for definition in UTM_PROPERTIES:
            try:
                client.crm.properties.core_api.create(
                    object_type=OBJECT_TYPE,
                    property_create=PropertyCreate(
                        name=definition.name,
                        label=definition.label,
                        type=definition.type,
                        field_type=definition.field_type,
                        group_name=group,
                    ),
                )
                result["created"].append(definition.name)
            except Exception as e:
                logger.warning(f"Property {definition.name} might already exist: {e}")
                result["skipped"].append(definition.name)

        logger.info(
            f"HubSpot UTM properties: {len(result['created'])} created, "
            f"{len(result['skipped'])} skipped"
        )
        return result
