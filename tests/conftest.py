"""Pytest fixtures for pagerduty-adapter tests."""

from collections.abc import Callable

import httpx
import pytest

from pagerduty_adapter.config import AdapterConfig
from pagerduty_adapter.connectors.pagerduty import PagerDutyConnector
from pagerduty_adapter.models.entity import AttributeSpec, AttributeType, EntitySpec
from pagerduty_adapter.models.page import PageRequest


@pytest.fixture
def config() -> AdapterConfig:
    """Complete adapter config as the host would send it."""
    return AdapterConfig(
        api_version="2",
        api_base_url="https://api.pagerduty.com",
        auth_token="config-token",
        accept_header="application/vnd.pagerduty+json",
        content_type="application/json",
    )


@pytest.fixture
def teams_entity() -> EntitySpec:
    """Teams entity requesting id and name."""
    return EntitySpec(
        external_id="teams",
        attributes=(
            AttributeSpec(external_id="id", type=AttributeType.STRING),
            AttributeSpec(external_id="name", type=AttributeType.STRING),
        ),
    )


@pytest.fixture
def page_request(teams_entity: EntitySpec) -> PageRequest:
    """First-page request for teams."""
    return PageRequest(
        entity=teams_entity,
        page_size=2,
        cursor="",
        ordered=False,
        auth_token="secret",
    )


@pytest.fixture
def make_connector() -> Callable[..., PagerDutyConnector]:
    """Build a PagerDutyConnector whose HTTP calls go to the given handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> PagerDutyConnector:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return PagerDutyConnector(client=client)

    return _make
