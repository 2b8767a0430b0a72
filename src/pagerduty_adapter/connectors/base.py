"""Abstract base class for datasource connectors."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Optional

from pagerduty_adapter.config import AdapterConfig
from pagerduty_adapter.entities import EntityDescriptor
from pagerduty_adapter.errors import AdapterError
from pagerduty_adapter.models.page import PageRequest, PageResponse, PageResult

logger = logging.getLogger(__name__)


class BaseConnector(ABC):
    """
    Standard interface for datasource connectors.
    All connectors must implement request validation and page retrieval.
    """

    source_id: str = ""

    def close(self) -> None:
        """Release held resources. Connectors without any keep the default."""

    def __enter__(self) -> "BaseConnector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @abstractmethod
    def validate(self, config: Optional[AdapterConfig], request: PageRequest) -> EntityDescriptor:
        """
        Check the request before any network call. Raises AdapterError.
        """
        pass

    @abstractmethod
    def request_page(
        self,
        config: AdapterConfig,
        request: PageRequest,
        *,
        timeout: Optional[float] = None,
    ) -> PageResult:
        """
        Fetch and convert one page. Raises AdapterError.
        timeout: remaining seconds of the caller's deadline, if any.
        """
        pass

    def get_page(
        self,
        config: Optional[AdapterConfig],
        request: PageRequest,
        *,
        timeout: Optional[float] = None,
    ) -> PageResponse:
        """
        Host entry point: validate, then fetch. Never raises for adapter errors;
        the response carries either the page or the error.
        """
        try:
            self.validate(config, request)
            page = self.request_page(config, request, timeout=timeout)
        except AdapterError as e:
            logger.warning("GetPage failed for %s: %s", request.entity.external_id, e)
            return PageResponse(error=e.to_info())
        return PageResponse(success=page)

    def iter_pages(
        self,
        config: AdapterConfig,
        request: PageRequest,
        *,
        max_pages: Optional[int] = None,
    ) -> Iterator[PageResult]:
        """
        Walk pages by round-tripping the cursor, the way the ingestion host does.
        Stops on an empty cursor, a repeated cursor or max_pages. Raises AdapterError.
        """
        self.validate(config, request)
        seen: set[str] = set()
        pages = 0
        while True:
            page = self.request_page(config, request, timeout=None)
            pages += 1
            yield page
            cursor = page.next_cursor
            if not cursor or cursor in seen:
                if cursor:
                    logger.warning("Cursor %r repeated; stopping pagination", cursor)
                return
            if max_pages is not None and pages >= max_pages:
                return
            seen.add(cursor)
            request = request.model_copy(update={"cursor": cursor})
