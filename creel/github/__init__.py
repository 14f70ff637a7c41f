"""GitHub REST source for release and commit facts."""

from __future__ import annotations

from .client import GitHubReleaseClient, GitHubRestConfig
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .observability import ErrorCategory, categorize_error

__all__ = [
    "ErrorCategory",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubReleaseClient",
    "GitHubResponseShapeError",
    "GitHubRestConfig",
    "categorize_error",
]
