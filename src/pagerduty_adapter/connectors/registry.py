"""Registry for discovering and instantiating connectors."""

from typing import Type

from pagerduty_adapter.connectors.base import BaseConnector
from pagerduty_adapter.connectors.pagerduty import PagerDutyConnector


class ConnectorRegistry:
    """Connectors keyed by their own source_id."""

    _connectors: dict[str, Type[BaseConnector]] = {}

    @classmethod
    def register(cls, connector_cls: Type[BaseConnector]) -> Type[BaseConnector]:
        """Add a connector class under its source_id. Usable as a class decorator."""
        source_id = connector_cls.source_id.lower()
        if not source_id:
            raise ValueError(f"{connector_cls.__name__} has no source_id")
        existing = cls._connectors.get(source_id)
        if existing is not None and existing is not connector_cls:
            raise ValueError(f"Source {source_id!r} already registered by {existing.__name__}")
        cls._connectors[source_id] = connector_cls
        return connector_cls

    @classmethod
    def get(cls, source_id: str, **kwargs) -> BaseConnector:
        """Get a connector instance for the given source. kwargs passed to connector __init__."""
        connector_cls = cls._connectors.get(source_id.lower())
        if not connector_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {cls.available_sources()}")
        return connector_cls(**kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Registered source identifiers, sorted."""
        return sorted(cls._connectors)


ConnectorRegistry.register(PagerDutyConnector)
