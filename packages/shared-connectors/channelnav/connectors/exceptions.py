"""Custom exceptions for CRM connectors."""

from __future__ import annotations


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class AuthenticationError(ConnectorError):
    """Raised when the CRM client cannot be created."""

    pass


class SyncError(ConnectorError):
    """Raised when pushing data to the CRM fails."""

    pass
