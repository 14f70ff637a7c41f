"""GitHub release client errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        rate_limit_exhausted: bool = False,
    ) -> None:
        """Initialise with a message, HTTP status code and rate-limit flag."""
        self.status_code = status_code
        self.rate_limit_exhausted = rate_limit_exhausted
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, path: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"GitHub REST HTTP {status_code} for {path}", status_code=status_code
        )

    @classmethod
    def rate_limited(cls, status_code: int, path: str) -> GitHubAPIError:
        """Return an error once rate-limit retries are exhausted."""
        return cls(
            f"GitHub rate limit still exceeded for {path} after retries",
            status_code=status_code,
            rate_limit_exhausted=True,
        )

    @classmethod
    def not_found(cls, path: str) -> GitHubAPIError:
        """Return an error for a missing repository or ref."""
        return cls(f"GitHub resource not found: {path}", status_code=404)


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub REST responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub REST response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("CREEL_GITHUB_TOKEN (or GITHUB_TOKEN) is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
