"""ChannelNav CRM Connectors.

This package pushes attribution data into external CRMs:
- HubSpot contact properties (first/last touch, touchpoints, revenue, CAC)
- HubSpot property group and definitions setup

Example:
    from channelnav.connectors import HubSpotConfig, HubSpotContactSync
    from channelnav.tracking import MetricsAggregator

    sync = HubSpotContactSync(HubSpotConfig.from_env(), MetricsAggregator(store))
    sync.create_utm_properties()
    sync.sync_contact_properties("12345")
"""

from channelnav.connectors.config import HubSpotConfig
from channelnav.connectors.exceptions import (
    AuthenticationError,
    ConnectorError,
    SyncError,
)
from channelnav.connectors.hubspot import (
    UTM_PROPERTIES,
    HubSpotContactSync,
    build_contact_properties,
)

__all__ = [
    # Config
    "HubSpotConfig",
    # Exceptions
    "AuthenticationError",
    "ConnectorError",
    "SyncError",
    # HubSpot
    "HubSpotContactSync",
    "UTM_PROPERTIES",
    "build_contact_properties",
]
