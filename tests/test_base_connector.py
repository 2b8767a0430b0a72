"""Unit tests for BaseConnector interface."""

from typing import Optional

import pytest

from pagerduty_adapter.config import AdapterConfig
from pagerduty_adapter.connectors.base import BaseConnector
from pagerduty_adapter.entities import ENTITIES, EntityDescriptor
from pagerduty_adapter.errors import AdapterError, ErrorCode
from pagerduty_adapter.models.page import PageRequest, PageResult


class ConcreteConnector(BaseConnector):
    """Concrete implementation for testing base behavior."""

    source_id = "test"

    def __init__(self, cursors: list[str], fail_validation: bool = False):
        self.cursors = cursors
        self.fail_validation = fail_validation
        self.requested: list[str] = []

    def validate(self, config: Optional[AdapterConfig], request: PageRequest) -> EntityDescriptor:
        if self.fail_validation:
            raise AdapterError("bad entity", ErrorCode.INVALID_ENTITY_CONFIG)
        return ENTITIES["teams"]

    def request_page(self, config, request, *, timeout=None) -> PageResult:
        self.requested.append(request.cursor)
        next_cursor = self.cursors[len(self.requested) - 1]
        return PageResult(objects=[{"id": str(len(self.requested))}], next_cursor=next_cursor)


class TestBaseConnectorGetPage:
    """Tests for get_page envelope handling."""

    def test_success_envelope(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """A fetched page is returned as success."""
        response = ConcreteConnector(cursors=["2"]).get_page(config, page_request)
        assert response.ok
        assert response.error is None
        assert response.success.next_cursor == "2"

    def test_validation_error_envelope(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """Validation failures come back as errors without fetching."""
        connector = ConcreteConnector(cursors=["2"], fail_validation=True)
        response = connector.get_page(config, page_request)
        assert not response.ok
        assert response.success is None
        assert response.error.code is ErrorCode.INVALID_ENTITY_CONFIG
        assert response.error.message == "bad entity"
        assert connector.requested == []


class TestBaseConnectorIterPages:
    """Tests for iter_pages cursor round-tripping."""

    def test_follows_cursor_until_empty(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """Each call receives the previous page's cursor."""
        connector = ConcreteConnector(cursors=["2", "4", ""])
        pages = list(connector.iter_pages(config, page_request))
        assert len(pages) == 3
        assert connector.requested == ["", "2", "4"]

    def test_stops_on_repeated_cursor(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """A cursor seen before ends the walk."""
        connector = ConcreteConnector(cursors=["a", "b", "a", "c"])
        pages = list(connector.iter_pages(config, page_request))
        assert len(pages) == 3
        assert connector.requested == ["", "a", "b"]

    def test_max_pages(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """max_pages caps the number of calls."""
        connector = ConcreteConnector(cursors=["1", "2", "3", ""])
        pages = list(connector.iter_pages(config, page_request, max_pages=2))
        assert len(pages) == 2

    def test_validation_error_raises(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """iter_pages raises instead of wrapping."""
        connector = ConcreteConnector(cursors=[""], fail_validation=True)
        with pytest.raises(AdapterError):
            list(connector.iter_pages(config, page_request))
