"""Error categorisation for GitHub fetch failures.

Fetch failures are logged with a category so operators can tell a transient
outage or exhausted rate limit from a misconfigured token or a repository
that does not exist.
"""

from __future__ import annotations

import enum

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500
_HTTP_TOO_MANY_REQUESTS = 429


class ErrorCategory(enum.StrEnum):
    """Categories for fetch error classification in logs."""

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    NETWORK = "network"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (msgspec.DecodeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (httpx.TimeoutException, ErrorCategory.TRANSIENT),
    (httpx.TransportError, ErrorCategory.NETWORK),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception raised while fetching release facts.

    Returns:
        ErrorCategory indicating the type of failure.

    """
    # GitHubAPIError requires status code inspection
    if isinstance(exc, GitHubAPIError):
        status = exc.status_code
        if exc.rate_limit_exhausted or status == _HTTP_TOO_MANY_REQUESTS:
            return ErrorCategory.RATE_LIMITED
        if status is not None and status >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN
