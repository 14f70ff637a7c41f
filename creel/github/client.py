"""GitHub REST client that supplies release and commit facts."""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses
import datetime as dt
import os
import typing as typ
from urllib.parse import quote

import httpx

from creel.common.slug import qualify_repository, repo_slug
from creel.common.time import parse_github_datetime, utcnow
from creel.logging import get_logger, log_warning
from creel.releases.models import CommitFact, ReleaseFact
from creel.releases.source import ReleaseSource

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

__all__ = ["GitHubReleaseClient", "GitHubRestConfig", "ReleaseSource"]

logger = get_logger(__name__)

_DEFAULT_API_URL = "https://api.github.com"
_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_SERVER_ERROR_THRESHOLD = 500
_HTTP_FORBIDDEN = 403
_HTTP_NOT_FOUND = 404
_HTTP_TOO_MANY_REQUESTS = 429
_MAX_BACKOFF_S = 60.0

Sleep = cabc.Callable[[float], cabc.Awaitable[None]]


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client.

    Attributes
    ----------
    token
        Personal access or app token sent as a bearer token.
    org
        Organisation used to qualify bare repository names.
    api_url
        Base URL of the REST API; override for GitHub Enterprise.
    timeout_s
        Per-request timeout in seconds.
    user_agent
        Value of the ``User-Agent`` header.
    max_retries
        Retries for rate-limited and server-error responses.
    per_page
        Page size for list endpoints (GitHub caps this at 100).
    max_pages
        Upper bound on pages read from the unbounded commit history of an
        initial release.

    """

    token: str
    org: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "creel/0.1"
    max_retries: int = 3
    per_page: int = 100
    max_pages: int = 10

    @classmethod
    def from_env(
        cls, *, org: str | None = None, api_url: str | None = None
    ) -> GitHubRestConfig:
        """Build configuration from ``CREEL_GITHUB_*`` environment variables.

        ``CREEL_GITHUB_TOKEN`` takes precedence over ``GITHUB_TOKEN``.
        Explicit ``org`` and ``api_url`` arguments win over
        ``CREEL_GITHUB_ORG`` and ``CREEL_GITHUB_API_URL``.
        """
        token = (
            os.environ.get("CREEL_GITHUB_TOKEN", "").strip()
            or os.environ.get("GITHUB_TOKEN", "").strip()
        )
        if not token:
            raise GitHubConfigError.missing_token()
        env_org = os.environ.get("CREEL_GITHUB_ORG", "").strip() or None
        env_api_url = os.environ.get("CREEL_GITHUB_API_URL", "").strip()
        base_url = (api_url or env_api_url).rstrip("/")
        return cls(
            token=token,
            org=org or env_org,
            api_url=base_url or _DEFAULT_API_URL,
        )


def _require_str(payload: dict[str, typ.Any], field: str) -> str:
    value = payload.get(field)
    if not isinstance(value, str):
        raise GitHubResponseShapeError.missing(field)
    return value


def _release_from_payload(payload: dict[str, typ.Any]) -> ReleaseFact | None:
    """Convert a REST release object, skipping drafts."""
    if payload.get("draft"):
        return None
    tag = _require_str(payload, "tag_name")
    created_raw = payload.get("published_at") or payload.get("created_at")
    if not isinstance(created_raw, str):
        raise GitHubResponseShapeError.missing("created_at")
    body = payload.get("body")
    name = payload.get("name")
    return ReleaseFact(
        tag=tag,
        created_at=parse_github_datetime(created_raw),
        body=body if isinstance(body, str) and body.strip() else None,
        name=name if isinstance(name, str) and name else None,
    )


def _commit_author(payload: dict[str, typ.Any], commit: dict[str, typ.Any]) -> str:
    account = payload.get("author")
    if isinstance(account, dict):
        login = account.get("login")
        if isinstance(login, str) and login:
            return login
    git_author = commit.get("author")
    if isinstance(git_author, dict):
        name = git_author.get("name")
        if isinstance(name, str) and name:
            return name
    return "unknown"


def _commit_from_payload(payload: dict[str, typ.Any]) -> CommitFact:
    """Convert a REST commit object into a :class:`CommitFact`."""
    sha = _require_str(payload, "sha")
    commit = payload.get("commit")
    if not isinstance(commit, dict):
        raise GitHubResponseShapeError.missing("commit")
    message = commit.get("message")
    committer = commit.get("committer") or commit.get("author")
    if not isinstance(committer, dict):
        raise GitHubResponseShapeError.missing("commit.committer")
    committed_raw = committer.get("date")
    if not isinstance(committed_raw, str):
        raise GitHubResponseShapeError.missing("commit.committer.date")
    return CommitFact(
        sha=sha,
        message=message if isinstance(message, str) else "",
        author=_commit_author(payload, commit),
        committed_at=parse_github_datetime(committed_raw),
    )


def _retry_delay(response: httpx.Response, attempt: int) -> float:
    """Return how long to wait before retrying ``response``."""
    retry_after = response.headers.get("retry-after")
    if retry_after is not None:
        try:
            return min(max(float(retry_after), 0.0), _MAX_BACKOFF_S)
        except ValueError:
            pass
    reset = response.headers.get("x-ratelimit-reset")
    if reset is not None and response.headers.get("x-ratelimit-remaining") == "0":
        try:
            reset_at = dt.datetime.fromtimestamp(int(reset), tz=dt.UTC)
        except ValueError:
            pass
        else:
            wait = (reset_at - utcnow()).total_seconds()
            return min(max(wait, 0.0), _MAX_BACKOFF_S)
    return min(float(2**attempt), _MAX_BACKOFF_S)


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == _HTTP_TOO_MANY_REQUESTS:
        return True
    return (
        response.status_code == _HTTP_FORBIDDEN
        and response.headers.get("x-ratelimit-remaining") == "0"
    )


def _is_retryable(response: httpx.Response) -> bool:
    return (
        _is_rate_limited(response)
        or response.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
    )


class GitHubReleaseClient:
    """GitHub REST implementation of :class:`ReleaseSource`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._sleep = sleep
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bearer {config.token}",
                "User-Agent": config.user_agent,
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitHubReleaseClient:
        """Return the client for use as an async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    async def list_releases(
        self, repository: str, *, limit: int | None = None
    ) -> list[ReleaseFact]:
        """Return published releases of ``repository``, newest first.

        Parameters
        ----------
        repository
            Bare name (qualified with the configured organisation) or
            ``owner/name`` slug.
        limit
            Stop after this many releases; ``None`` reads every page.

        """
        releases: list[ReleaseFact] = []
        url: str | None = self._repo_url(repository, "releases")
        params: dict[str, typ.Any] | None = {"per_page": self._config.per_page}
        while url is not None:
            response = await self._get(url, params=params)
            for payload in self._json_list(response, "releases"):
                release = _release_from_payload(payload)
                if release is None:
                    continue
                releases.append(release)
                if limit is not None and len(releases) >= limit:
                    return releases
            url = self._next_page(response)
            params = None
        return releases

    async def get_release(self, repository: str, tag: str) -> ReleaseFact | None:
        """Return the release published for ``tag``, or ``None``."""
        url = self._repo_url(repository, f"releases/tags/{quote(tag, safe='')}")
        response = await self._request(url, params=None)
        if response.status_code == _HTTP_NOT_FOUND:
            return None
        self._raise_for_status(response, url)
        payload = response.json()
        if not isinstance(payload, dict):
            raise GitHubResponseShapeError.missing("release")
        return _release_from_payload(payload)

    async def commits_between(
        self,
        repository: str,
        from_tag: str | None,
        to_tag: str,
    ) -> list[CommitFact]:
        """Return commits after ``from_tag`` up to ``to_tag``, oldest first.

        With ``from_tag`` the compare endpoint is used. Without it the
        history of ``to_tag`` is read newest first and reversed, bounded by
        ``max_pages``.
        """
        if from_tag is not None:
            return await self._compare(repository, from_tag, to_tag)
        return await self._history(repository, to_tag)

    async def _compare(
        self, repository: str, from_tag: str, to_tag: str
    ) -> list[CommitFact]:
        basehead = f"{quote(from_tag, safe='')}...{quote(to_tag, safe='')}"
        url: str | None = self._repo_url(repository, f"compare/{basehead}")
        params: dict[str, typ.Any] | None = {"per_page": self._config.per_page}
        commits: list[CommitFact] = []
        while url is not None:
            response = await self._get(url, params=params)
            payload = response.json()
            if not isinstance(payload, dict):
                raise GitHubResponseShapeError.missing("comparison")
            raw_commits = payload.get("commits")
            if not isinstance(raw_commits, list):
                raise GitHubResponseShapeError.missing("commits")
            commits.extend(
                _commit_from_payload(item)
                for item in raw_commits
                if isinstance(item, dict)
            )
            url = self._next_page(response)
            params = None
        return commits

    async def _history(self, repository: str, to_tag: str) -> list[CommitFact]:
        url: str | None = self._repo_url(repository, "commits")
        params: dict[str, typ.Any] | None = {
            "sha": to_tag,
            "per_page": self._config.per_page,
        }
        newest_first: list[CommitFact] = []
        pages = 0
        while url is not None and pages < self._config.max_pages:
            response = await self._get(url, params=params)
            newest_first.extend(
                _commit_from_payload(item)
                for item in self._json_list(response, "commits")
            )
            pages += 1
            url = self._next_page(response)
            params = None
        if url is not None:
            log_warning(
                logger,
                "Commit history for %s at %s truncated after %d pages",
                repository,
                to_tag,
                pages,
            )
        newest_first.reverse()
        return newest_first

    def _repo_url(self, repository: str, suffix: str) -> str:
        owner, name = qualify_repository(repository, self._config.org)
        base = self._config.api_url.rstrip("/")
        return f"{base}/repos/{repo_slug(owner, name)}/{suffix}"

    @staticmethod
    def _next_page(response: httpx.Response) -> str | None:
        link = response.links.get("next")
        if not link:
            return None
        return link.get("url")

    @staticmethod
    def _json_list(
        response: httpx.Response, field: str
    ) -> list[dict[str, typ.Any]]:
        payload = response.json()
        if not isinstance(payload, list):
            raise GitHubResponseShapeError.missing(field)
        return [item for item in payload if isinstance(item, dict)]

    async def _get(
        self, url: str, *, params: dict[str, typ.Any] | None
    ) -> httpx.Response:
        response = await self._request(url, params=params)
        self._raise_for_status(response, url)
        return response

    async def _request(
        self, url: str, *, params: dict[str, typ.Any] | None
    ) -> httpx.Response:
        """Issue a GET, retrying rate-limited and server-error responses."""
        attempt = 0
        while True:
            response = await self._client.get(url, params=params)
            if not _is_retryable(response) or attempt >= self._config.max_retries:
                return response
            delay = _retry_delay(response, attempt)
            log_warning(
                logger,
                "GitHub returned HTTP %d for %s; retrying in %.1fs (attempt %d/%d)",
                response.status_code,
                url,
                delay,
                attempt + 1,
                self._config.max_retries,
            )
            await self._sleep(delay)
            attempt += 1

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        status = response.status_code
        if status < _HTTP_ERROR_STATUS_THRESHOLD:
            return
        path = httpx.URL(url).path
        if _is_rate_limited(response):
            raise GitHubAPIError.rate_limited(status, path)
        if status == _HTTP_NOT_FOUND:
            raise GitHubAPIError.not_found(path)
        raise GitHubAPIError.http_error(status, path)
