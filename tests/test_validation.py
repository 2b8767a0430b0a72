"""Unit tests for GetPage request validation."""

import pytest

from pagerduty_adapter.config import AdapterConfig
from pagerduty_adapter.errors import AdapterError, ErrorCode
from pagerduty_adapter.models.entity import AttributeSpec, EntitySpec
from pagerduty_adapter.models.page import PageRequest
from pagerduty_adapter.validation import MAX_PAGE_SIZE, validate_page_request


def _assert_code(excinfo: pytest.ExceptionInfo, code: ErrorCode) -> None:
    assert excinfo.value.code is code


class TestValidatePageRequest:
    """Tests for validate_page_request."""

    def test_valid_request_returns_descriptor(
        self, config: AdapterConfig, page_request: PageRequest
    ) -> None:
        """A valid request yields the teams descriptor."""
        descriptor = validate_page_request(config, page_request)
        assert descriptor.external_id == "teams"
        assert descriptor.unique_id_attribute == "id"

    def test_invalid_config(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """A config missing a field is an invalid datasource config."""
        with pytest.raises(AdapterError, match="Provided config is invalid: contentType is not set") as excinfo:
            validate_page_request(config.model_copy(update={"content_type": ""}), page_request)
        _assert_code(excinfo, ErrorCode.INVALID_DATASOURCE_CONFIG)

    def test_missing_config(self, page_request: PageRequest) -> None:
        """No config at all is an invalid datasource config."""
        with pytest.raises(AdapterError) as excinfo:
            validate_page_request(None, page_request)
        _assert_code(excinfo, ErrorCode.INVALID_DATASOURCE_CONFIG)

    def test_missing_token(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """The caller must supply a token."""
        with pytest.raises(AdapterError, match="missing required token") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"auth_token": ""}))
        _assert_code(excinfo, ErrorCode.INVALID_DATASOURCE_CONFIG)

    def test_unknown_entity(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """Only registered entities may be requested."""
        entity = EntitySpec(external_id="users", attributes=(AttributeSpec(external_id="id"),))
        with pytest.raises(AdapterError, match="Invalid entity external ID: users") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"entity": entity}))
        _assert_code(excinfo, ErrorCode.INVALID_ENTITY_CONFIG)

    def test_missing_unique_id_attribute(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """The unique ID attribute must be among requested attributes."""
        entity = EntitySpec(external_id="teams", attributes=(AttributeSpec(external_id="name"),))
        with pytest.raises(AdapterError, match="missing unique ID attribute") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"entity": entity}))
        _assert_code(excinfo, ErrorCode.INVALID_ENTITY_CONFIG)

    def test_child_entities_rejected(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """Child entities are not supported."""
        child = EntitySpec(external_id="members", attributes=(AttributeSpec(external_id="id"),))
        entity = page_request.entity.model_copy(update={"child_entities": (child,)})
        with pytest.raises(AdapterError, match="does not support child entities") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"entity": entity}))
        _assert_code(excinfo, ErrorCode.INVALID_ENTITY_CONFIG)

    def test_ordered_rejected(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """Ordered responses cannot be guaranteed."""
        with pytest.raises(AdapterError, match="Ordered must be set to false") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"ordered": True}))
        _assert_code(excinfo, ErrorCode.INVALID_ENTITY_CONFIG)

    @pytest.mark.parametrize("page_size", [MAX_PAGE_SIZE + 1, 250, 10_000])
    def test_page_size_too_large(
        self, config: AdapterConfig, page_request: PageRequest, page_size: int
    ) -> None:
        """Page sizes over the maximum are an invalid page request."""
        with pytest.raises(AdapterError, match=f"Provided page size \\({page_size}\\) exceeds maximum") as excinfo:
            validate_page_request(config, page_request.model_copy(update={"page_size": page_size}))
        _assert_code(excinfo, ErrorCode.INVALID_PAGE_REQUEST_CONFIG)

    @pytest.mark.parametrize("page_size", [0, 1, MAX_PAGE_SIZE])
    def test_page_size_within_limit(
        self, config: AdapterConfig, page_request: PageRequest, page_size: int
    ) -> None:
        """Page sizes up to the maximum are accepted."""
        validate_page_request(config, page_request.model_copy(update={"page_size": page_size}))

    def test_checks_short_circuit_in_order(self, config: AdapterConfig, page_request: PageRequest) -> None:
        """With several problems, the earliest check is reported."""
        bad = page_request.model_copy(update={"ordered": True, "page_size": 500})
        with pytest.raises(AdapterError) as excinfo:
            validate_page_request(config, bad)
        _assert_code(excinfo, ErrorCode.INVALID_ENTITY_CONFIG)
