"""Parsers for PagerDuty list responses."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from pagerduty_adapter.errors import AdapterError, ErrorCode
from pagerduty_adapter.models.raw import RawRecord
from pagerduty_adapter.pagination import OffsetPagination, PaginationStrategy

logger = logging.getLogger(__name__)


class ListMetadata(BaseModel):
    """Classic pagination fields PagerDuty returns next to the collection."""

    model_config = ConfigDict(extra="ignore")

    limit: Optional[int] = None
    offset: Optional[int] = None
    total: Optional[int] = None
    more: Optional[bool] = None


def parse_response(
    body: bytes | str,
    page_size: int,
    cursor: str,
    *,
    collection_field: str = "teams",
    pagination: Optional[PaginationStrategy] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> tuple[list[RawRecord], str]:
    """
    Decode a list response into raw records and the next cursor.
    An absent collection field is a datasource failure; an empty one is a valid empty page.
    """
    try:
        data: Any = json.loads(body)
    except ValueError as e:
        raise AdapterError(
            f"Failed to unmarshal the datasource response: {e}.",
            ErrorCode.INTERNAL,
        ) from e

    if not isinstance(data, dict):
        raise AdapterError(
            f"Failed to unmarshal the datasource response: expected an object, got {type(data).__name__}.",
            ErrorCode.INTERNAL,
        )

    items = data.get(collection_field)
    if items is None:
        raise AdapterError(
            f"PagerDuty API response is missing '{collection_field}' field.",
            ErrorCode.DATASOURCE_FAILED,
        )
    if not isinstance(items, list):
        raise AdapterError(
            f"PagerDuty API response field '{collection_field}' is not a list.",
            ErrorCode.DATASOURCE_FAILED,
        )

    records: list[RawRecord] = []
    for item in items:
        if not isinstance(item, dict):
            raise AdapterError(
                f"PagerDuty API response field '{collection_field}' contains a non-object item.",
                ErrorCode.DATASOURCE_FAILED,
            )
        records.append(RawRecord(data=item))

    try:
        meta = ListMetadata.model_validate(data)
    except ValidationError:
        meta = ListMetadata()
    logger.debug(
        "Parsed %d %s (limit=%s offset=%s total=%s more=%s)",
        len(records), collection_field, meta.limit, meta.offset, meta.total, meta.more,
    )

    strategy = pagination or OffsetPagination()
    next_cursor = strategy.next_cursor(headers or {}, len(records), page_size, cursor) or ""
    return records, next_cursor
