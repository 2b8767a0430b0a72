"""Static registry of entities the datasource supports."""

from dataclasses import dataclass, field

from pagerduty_adapter.errors import AdapterError, ErrorCode
from pagerduty_adapter.pagination import (
    FirstAvailablePagination,
    HeaderTokenPagination,
    OffsetPagination,
    PaginationStrategy,
)

TEAMS = "teams"

NEXT_PAGE_HEADER = "X-Next-Page"


@dataclass(frozen=True)
class EntityDescriptor:
    """Entity-specific facts: unique ID attribute, response collection field, pagination."""

    external_id: str
    unique_id_attribute: str
    collection_field: str
    pagination: PaginationStrategy = field(default_factory=OffsetPagination)


ENTITIES: dict[str, EntityDescriptor] = {
    TEAMS: EntityDescriptor(
        external_id=TEAMS,
        unique_id_attribute="id",
        collection_field="teams",
        pagination=FirstAvailablePagination(
            HeaderTokenPagination(NEXT_PAGE_HEADER),
            OffsetPagination(),
        ),
    ),
}


def get_entity(external_id: str, entities: dict[str, EntityDescriptor] = ENTITIES) -> EntityDescriptor:
    """Look up a supported entity. Unknown IDs are an entity config error."""
    descriptor = entities.get(external_id)
    if descriptor is None:
        raise AdapterError(
            f"Invalid entity external ID: {external_id}",
            ErrorCode.INVALID_ENTITY_CONFIG,
        )
    return descriptor
