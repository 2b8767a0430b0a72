"""GetPage request validation. Runs before any network I/O."""

from typing import Optional

from pagerduty_adapter.config import AdapterConfig, validate_config
from pagerduty_adapter.entities import ENTITIES, EntityDescriptor, get_entity
from pagerduty_adapter.errors import AdapterError, ConfigError, ErrorCode
from pagerduty_adapter.models.page import PageRequest

MAX_PAGE_SIZE = 100


def validate_page_request(
    config: Optional[AdapterConfig],
    request: PageRequest,
    *,
    entities: dict[str, EntityDescriptor] = ENTITIES,
    max_page_size: int = MAX_PAGE_SIZE,
) -> EntityDescriptor:
    """
    Check the request against the adapter contract; first failure wins.
    Returns the descriptor of the requested entity.
    """
    try:
        validate_config(config)
    except ConfigError as e:
        raise AdapterError(
            f"Provided config is invalid: {e}.",
            ErrorCode.INVALID_DATASOURCE_CONFIG,
        ) from e

    # PagerDuty has no basic auth; a token is required.
    if not request.auth_token:
        raise AdapterError(
            "PagerDuty auth is missing required token.",
            ErrorCode.INVALID_DATASOURCE_CONFIG,
        )

    entity = request.entity
    descriptor = get_entity(entity.external_id, entities)

    if not entity.has_attribute(descriptor.unique_id_attribute):
        raise AdapterError(
            "Requested entity attributes are missing unique ID attribute "
            f"('{descriptor.unique_id_attribute}').",
            ErrorCode.INVALID_ENTITY_CONFIG,
        )

    if entity.child_entities:
        raise AdapterError(
            "Requested entity does not support child entities.",
            ErrorCode.INVALID_ENTITY_CONFIG,
        )

    if request.ordered:
        raise AdapterError(
            "Ordered must be set to false for PagerDuty API.",
            ErrorCode.INVALID_ENTITY_CONFIG,
        )

    if request.page_size > max_page_size:
        raise AdapterError(
            f"Provided page size ({request.page_size}) exceeds maximum ({max_page_size}).",
            ErrorCode.INVALID_PAGE_REQUEST_CONFIG,
        )

    return descriptor
