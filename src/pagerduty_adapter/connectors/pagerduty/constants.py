"""PagerDuty REST API constants."""

# Per-call timeout (seconds), applied even when the host sets no deadline.
REQUEST_TIMEOUT = 5.0

# Query parameters
LIMIT_PARAM = "limit"
OFFSET_PARAM = "offset"

# Headers
AUTH_SCHEME = "Token token="
RETRY_AFTER_HEADER = "Retry-After"

# Max characters of an error response body kept in the error message.
ERROR_BODY_EXCERPT = 512
