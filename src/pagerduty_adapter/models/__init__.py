"""Data models for requests, raw records and page results."""

from pagerduty_adapter.models.entity import AttributeSpec, AttributeType, EntitySpec
from pagerduty_adapter.models.page import ErrorInfo, PageRequest, PageResponse, PageResult
from pagerduty_adapter.models.raw import RawRecord

__all__ = [
    "AttributeSpec",
    "AttributeType",
    "EntitySpec",
    "ErrorInfo",
    "PageRequest",
    "PageResponse",
    "PageResult",
    "RawRecord",
]
