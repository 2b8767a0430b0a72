"""PagerDuty REST API v2 connector."""

from pagerduty_adapter.connectors.pagerduty.connector import FetchedPage, PagerDutyConnector

__all__ = ["FetchedPage", "PagerDutyConnector"]
