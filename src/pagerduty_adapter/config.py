"""Adapter configuration passed by the ingestion host on every GetPage call."""

import json
import logging
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pagerduty_adapter.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2"
DEFAULT_API_BASE_URL = "https://api.pagerduty.com"
DEFAULT_ACCEPT_HEADER = "application/vnd.pagerduty+json"
DEFAULT_CONTENT_TYPE = "application/json"


class AdapterConfig(BaseModel):
    """
    Datasource config. JSON keys follow the host's camelCase names
    (apiVersion, apiBaseURL, authToken, acceptHeader, contentType).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_version: str = Field(default="", alias="apiVersion")
    api_base_url: str = Field(default="", alias="apiBaseURL")
    auth_token: str = Field(default="", alias="authToken", repr=False)
    accept_header: str = Field(default="", alias="acceptHeader")
    content_type: str = Field(default="", alias="contentType")

    def redacted(self) -> dict[str, str]:
        """Config as a dict safe for logs."""
        data = self.model_dump(by_alias=True)
        if data.get("authToken"):
            data["authToken"] = "***"
        return data

    @classmethod
    def from_env(cls) -> "AdapterConfig":
        """Build config from PAGERDUTY_* env vars. Only the token has no default."""
        return cls(
            api_version=os.environ.get("PAGERDUTY_API_VERSION", DEFAULT_API_VERSION),
            api_base_url=os.environ.get("PAGERDUTY_API_BASE_URL", DEFAULT_API_BASE_URL),
            auth_token=os.environ.get("PAGERDUTY_AUTH_TOKEN", ""),
            accept_header=os.environ.get("PAGERDUTY_ACCEPT_HEADER", DEFAULT_ACCEPT_HEADER),
            content_type=os.environ.get("PAGERDUTY_CONTENT_TYPE", DEFAULT_CONTENT_TYPE),
        )


def validate_config(config: Optional[AdapterConfig]) -> None:
    """Raise ConfigError naming the first missing field."""
    if config is None:
        raise ConfigError("request contains no config")

    logger.debug("Validating config: %s", config.redacted())

    for attr, key in (
        ("api_version", "apiVersion"),
        ("api_base_url", "apiBaseURL"),
        ("auth_token", "authToken"),
        ("accept_header", "acceptHeader"),
        ("content_type", "contentType"),
    ):
        if not getattr(config, attr):
            raise ConfigError(f"{key} is not set")


def parse_config(text: str | bytes) -> AdapterConfig:
    """Parse the JSON config string from the host request."""
    try:
        data = json.loads(text)
    except (ValueError, TypeError) as e:
        raise ConfigError(f"failed to parse config JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("failed to parse config JSON: expected an object")
    try:
        return AdapterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"failed to parse config JSON: {e}") from e
