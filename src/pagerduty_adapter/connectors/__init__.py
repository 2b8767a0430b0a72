"""Datasource connectors for page retrieval."""

from pagerduty_adapter.connectors.base import BaseConnector
from pagerduty_adapter.connectors.registry import ConnectorRegistry

__all__ = ["BaseConnector", "ConnectorRegistry"]
