"""Error codes and exceptions surfaced to the ingestion host."""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Adapter error codes understood by the ingestion service."""

    INTERNAL = "ERROR_CODE_INTERNAL"
    INVALID_DATASOURCE_CONFIG = "ERROR_CODE_INVALID_DATASOURCE_CONFIG"
    INVALID_ENTITY_CONFIG = "ERROR_CODE_INVALID_ENTITY_CONFIG"
    INVALID_PAGE_REQUEST_CONFIG = "ERROR_CODE_INVALID_PAGE_REQUEST_CONFIG"
    DATASOURCE_FAILED = "ERROR_CODE_DATASOURCE_FAILED"


class ConfigError(ValueError):
    """Adapter config is missing or incomplete."""


class ConversionError(ValueError):
    """A raw record could not be converted to the requested entity schema."""


class AdapterError(Exception):
    """
    Failure of a single GetPage call.
    Carries the HTTP status and Retry-After value when the datasource rejected the request,
    so the host can decide on backoff.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.retry_after = retry_after

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_info(self) -> "ErrorInfo":
        """Envelope payload for the host response."""
        from pagerduty_adapter.models.page import ErrorInfo

        return ErrorInfo(
            code=self.code,
            message=self.message,
            status_code=self.status_code,
            retry_after=self.retry_after,
        )
