"""Pagination strategies: derive the next cursor from a datasource response."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional


def next_offset_cursor(record_count: int, page_size: int, cursor: str) -> str:
    """
    Offset arithmetic: a full page means more data may exist.
    Non-numeric or empty cursors count as offset 0.
    """
    if page_size <= 0 or record_count != page_size:
        return ""
    try:
        offset = int(cursor) if cursor else 0
    except ValueError:
        offset = 0
    return str(offset + page_size)


class PaginationStrategy(ABC):
    """Selected per entity so the fetch routine never branches on the datasource."""

    @abstractmethod
    def next_cursor(
        self,
        headers: Mapping[str, str],
        record_count: int,
        page_size: int,
        cursor: str,
    ) -> Optional[str]:
        """Return the next cursor ("" = done), or None if this strategy has no answer."""


class OffsetPagination(PaginationStrategy):
    """limit/offset paging; cursor is the numeric offset."""

    def next_cursor(self, headers, record_count, page_size, cursor):
        return next_offset_cursor(record_count, page_size, cursor)


class HeaderTokenPagination(PaginationStrategy):
    """Continuation token supplied in a response header. An empty page ends pagination regardless."""

    def __init__(self, header: str = "X-Next-Page"):
        self.header = header

    def next_cursor(self, headers, record_count, page_size, cursor):
        if record_count == 0:
            return ""
        value = headers.get(self.header) or headers.get(self.header.lower())
        if value and value.strip():
            return value.strip()
        return None


class FirstAvailablePagination(PaginationStrategy):
    """Try strategies in order; first non-None answer wins."""

    def __init__(self, *strategies: PaginationStrategy):
        self.strategies = strategies

    def next_cursor(self, headers, record_count, page_size, cursor):
        for strategy in self.strategies:
            result = strategy.next_cursor(headers, record_count, page_size, cursor)
            if result is not None:
                return result
        return ""
