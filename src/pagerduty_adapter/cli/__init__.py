"""CLI for pagerduty-adapter."""
