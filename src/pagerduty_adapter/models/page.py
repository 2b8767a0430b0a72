"""Page request, page result and the host-facing response envelope."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagerduty_adapter.errors import ErrorCode
from pagerduty_adapter.models.entity import EntitySpec


class PageRequest(BaseModel):
    """One GetPage call. cursor is opaque; empty means first page."""

    model_config = ConfigDict(frozen=True)

    entity: EntitySpec
    page_size: int = 0
    cursor: str = ""
    ordered: bool = False
    auth_token: str = Field(default="", repr=False)


class PageResult(BaseModel):
    """Converted objects plus the cursor for the next call. Empty cursor ends pagination."""

    objects: list[dict[str, Any]] = Field(default_factory=list)
    next_cursor: str = ""


class ErrorInfo(BaseModel):
    """Error payload returned to the host."""

    code: ErrorCode
    message: str
    status_code: Optional[int] = None
    retry_after: Optional[str] = None


class PageResponse(BaseModel):
    """Exactly one of success or error is set."""

    success: Optional[PageResult] = None
    error: Optional[ErrorInfo] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "PageResponse":
        if (self.success is None) == (self.error is None):
            raise ValueError("PageResponse requires exactly one of success or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
