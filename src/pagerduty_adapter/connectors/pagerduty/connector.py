"""PagerDuty connector: one GET per page against the PagerDuty REST API v2.

Requests use classic limit/offset pagination:
    GET {apiBaseURL}/{entity}?limit={pageSize}&offset={cursor}
with a versioned Accept header and "Authorization: Token token=<credential>".
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from pagerduty_adapter.config import AdapterConfig
from pagerduty_adapter.connectors.base import BaseConnector
from pagerduty_adapter.conversion import DEFAULT_DATETIME_FORMATS, convert_records
from pagerduty_adapter.entities import ENTITIES, EntityDescriptor, get_entity
from pagerduty_adapter.errors import AdapterError, ConversionError, ErrorCode
from pagerduty_adapter.models.page import PageRequest, PageResult
from pagerduty_adapter.models.raw import RawRecord
from pagerduty_adapter.validation import validate_page_request

from .constants import (
    AUTH_SCHEME,
    ERROR_BODY_EXCERPT,
    LIMIT_PARAM,
    OFFSET_PARAM,
    REQUEST_TIMEOUT,
    RETRY_AFTER_HEADER,
)
from .parsers import parse_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """Raw records of one page before conversion."""

    records: list[RawRecord]
    next_cursor: str
    status_code: int


class PagerDutyConnector(BaseConnector):
    """
    Connector for PagerDuty teams.
    Holds a single httpx client and no per-call state, so one instance
    may serve concurrent GetPage calls.
    """

    source_id = "pagerduty"

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        entities: Optional[dict[str, EntityDescriptor]] = None,
    ):
        """
        Args:
            client: Optional httpx client (tests inject a MockTransport-backed one)
            entities: Override the supported entity registry
        """
        self._client = client or httpx.Client(timeout=REQUEST_TIMEOUT)
        self._entities = entities if entities is not None else ENTITIES

    def close(self) -> None:
        self._client.close()

    def validate(self, config: Optional[AdapterConfig], request: PageRequest) -> EntityDescriptor:
        return validate_page_request(config, request, entities=self._entities)

    def _build_url(self, config: AdapterConfig, request: PageRequest) -> httpx.URL:
        """Join base URL and entity path."""
        full_url = config.api_base_url.rstrip("/") + "/" + request.entity.external_id
        try:
            url = httpx.URL(full_url)
        except (httpx.InvalidURL, ValueError) as e:
            raise AdapterError(f"Failed to parse URL: {e}", ErrorCode.INTERNAL) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise AdapterError(f"Failed to parse URL: {full_url!r}", ErrorCode.INTERNAL)
        return url

    def _build_params(self, request: PageRequest) -> dict[str, str]:
        params: dict[str, str] = {}
        if request.page_size > 0:
            params[LIMIT_PARAM] = str(request.page_size)
        if request.cursor:
            params[OFFSET_PARAM] = request.cursor
        return params

    def _build_headers(self, config: AdapterConfig, token: str) -> dict[str, str]:
        accept = config.accept_header
        if "version=" not in accept:
            accept = f"{accept};version={config.api_version}"
        if not token.startswith(AUTH_SCHEME):
            token = AUTH_SCHEME + token
        return {
            "Accept": accept,
            "Content-Type": config.content_type,
            "Authorization": token,
        }

    def _effective_timeout(self, timeout: Optional[float]) -> float:
        """Per-call timeout, shortened by the caller's remaining deadline."""
        if timeout is None:
            return REQUEST_TIMEOUT
        if timeout <= 0:
            raise AdapterError(
                "Deadline exceeded before request to datasource was sent.",
                ErrorCode.INTERNAL,
            )
        return min(REQUEST_TIMEOUT, timeout)

    def _check_deadline(self, deadline: float, effective_timeout: float) -> None:
        if time.monotonic() >= deadline:
            raise AdapterError(
                f"Request to datasource timed out after {effective_timeout:.1f}s.",
                ErrorCode.INTERNAL,
            )

    def _read_body(self, response: httpx.Response, deadline: float, effective_timeout: float) -> bytes:
        """Read the streamed body chunk by chunk, aborting once the call deadline passes."""
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            self._check_deadline(deadline, effective_timeout)
        return b"".join(chunks)

    def _error_excerpt(self, response: httpx.Response, deadline: float) -> str:
        data = b""
        try:
            for chunk in response.iter_bytes():
                data += chunk
                if len(data) >= ERROR_BODY_EXCERPT or time.monotonic() >= deadline:
                    break
        except (httpx.HTTPError, httpx.StreamError):
            # keep whatever arrived before the failure
            pass
        return data.decode(response.encoding or "utf-8", errors="replace")[:ERROR_BODY_EXCERPT]

    def fetch_page(
        self,
        config: AdapterConfig,
        request: PageRequest,
        *,
        timeout: Optional[float] = None,
    ) -> FetchedPage:
        """Send the GET, classify the status and parse the body. Raises AdapterError."""
        descriptor = get_entity(request.entity.external_id, self._entities)
        url = self._build_url(config, request)
        params = self._build_params(request)
        headers = self._build_headers(config, request.auth_token)
        effective_timeout = self._effective_timeout(timeout)

        logger.debug("GET %s params=%s timeout=%.1fs", url, params, effective_timeout)
        deadline = time.monotonic() + effective_timeout
        try:
            with self._client.stream(
                "GET",
                url,
                params=params,
                headers=headers,
                timeout=effective_timeout,
            ) as response:
                if not response.is_success:
                    retry_after = response.headers.get(RETRY_AFTER_HEADER)
                    logger.warning(
                        "PagerDuty returned %d for %s (Retry-After=%s)",
                        response.status_code, url, retry_after,
                    )
                    raise AdapterError(
                        f"PagerDuty API request failed: {response.status_code} - "
                        f"{self._error_excerpt(response, deadline)}",
                        ErrorCode.DATASOURCE_FAILED,
                        status_code=response.status_code,
                        retry_after=retry_after,
                    )

                self._check_deadline(deadline, effective_timeout)
                try:
                    body = self._read_body(response, deadline, effective_timeout)
                except httpx.TimeoutException:
                    raise
                except (httpx.HTTPError, httpx.StreamError) as e:
                    raise AdapterError(
                        f"Failed to read response body: {e}",
                        ErrorCode.DATASOURCE_FAILED,
                        status_code=response.status_code,
                    ) from e

                records, next_cursor = parse_response(
                    body,
                    request.page_size,
                    request.cursor,
                    collection_field=descriptor.collection_field,
                    pagination=descriptor.pagination,
                    headers=response.headers,
                )
                status_code = response.status_code
        except httpx.TimeoutException as e:
            raise AdapterError(
                f"Request to datasource timed out after {effective_timeout:.1f}s: {e}",
                ErrorCode.INTERNAL,
            ) from e
        except httpx.TransportError as e:
            raise AdapterError(
                f"Failed to send request to datasource: {e}",
                ErrorCode.INTERNAL,
            ) from e

        logger.info(
            "Fetched %d %s (cursor=%r, next=%r)",
            len(records), request.entity.external_id, request.cursor, next_cursor,
        )
        return FetchedPage(records=records, next_cursor=next_cursor, status_code=status_code)

    def request_page(
        self,
        config: AdapterConfig,
        request: PageRequest,
        *,
        timeout: Optional[float] = None,
    ) -> PageResult:
        """Fetch one page and convert its records to the requested schema."""
        descriptor = get_entity(request.entity.external_id, self._entities)
        fetched = self.fetch_page(config, request, timeout=timeout)
        try:
            objects = convert_records(
                fetched.records,
                request.entity,
                json_path_attribute_names=True,
                datetime_formats=DEFAULT_DATETIME_FORMATS,
                unique_id_attribute=descriptor.unique_id_attribute,
            )
        except ConversionError as e:
            raise AdapterError(
                f"Failed to convert datasource response objects: {e}.",
                ErrorCode.INTERNAL,
            ) from e
        return PageResult(objects=objects, next_cursor=fetched.next_cursor)
