"""PagerDuty adapter: fetch pages of PagerDuty teams for identity-data ingestion."""

__version__ = "0.1.0"
