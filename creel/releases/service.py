"""Asynchronous driver that gathers release facts and aggregates them.

The pure engine in :mod:`creel.releases.aggregation` expects every fact up
front. :class:`ReleaseAggregationService` fetches those facts from a
:class:`~creel.releases.source.ReleaseSource`, fanning out across
repositories with bounded concurrency, then hands them to the engine.

Usage
-----
>>> from creel.github import GitHubReleaseClient, GitHubRestConfig
>>> from creel.releases import ReleaseAggregationService
>>>
>>> client = GitHubReleaseClient(GitHubRestConfig.from_env())
>>> service = ReleaseAggregationService(client)
>>> release = await service.run("v1.2.0", ["api", "web", "worker"])

"""

from __future__ import annotations

import asyncio
import datetime as dt
import time
import typing as typ

from .aggregation import aggregate
from .config import AggregationConfig, FetchFailurePolicy
from .errors import (
    AggregationCancelledError,
    ReleaseNotFoundError,
    RepositoryFetchError,
)
from .models import NoRelease, RepositoryInputs
from .observability import AggregationEventLogger
from .resolver import resolve

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import AggregatedRelease
    from .source import ReleaseSource


class ReleaseAggregationService:
    """Fetch per-repository facts concurrently and aggregate a release."""

    def __init__(
        self,
        source: ReleaseSource,
        config: AggregationConfig | None = None,
        event_logger: AggregationEventLogger | None = None,
    ) -> None:
        """Configure the service.

        Parameters
        ----------
        source
            Source-control facade supplying release histories and commits.
        config
            Concurrency, failure policy and timeout; defaults apply when
            omitted.
        event_logger
            Structured event emitter; a default instance is created when
            omitted.

        """
        self._source = source
        self._config = config or AggregationConfig()
        self._events = event_logger or AggregationEventLogger()

    @property
    def config(self) -> AggregationConfig:
        """Return the active configuration."""
        return self._config

    async def fetch_inputs(
        self, target_tag: str, repository: str
    ) -> RepositoryInputs:
        """Return the facts needed to aggregate ``repository``.

        Commits are only requested when the repository published
        ``target_tag``.
        """
        history = tuple(await self._source.list_releases(repository))
        try:
            resolved = resolve(history, target_tag)
        except ReleaseNotFoundError:
            return RepositoryInputs(release_history=history)
        previous_tag = resolved.previous.tag if resolved.previous else None
        commits = await self._source.commits_between(
            repository, previous_tag, resolved.current.tag
        )
        return RepositoryInputs(release_history=history, commits=tuple(commits))

    async def run(
        self,
        target_tag: str,
        repos: cabc.Sequence[str],
        *,
        generated_at: dt.datetime | None = None,
    ) -> AggregatedRelease:
        """Aggregate ``target_tag`` across ``repos``.

        Parameters
        ----------
        target_tag
            Version tag to aggregate.
        repos
            Repositories in output order.
        generated_at
            Timestamp recorded on the aggregate; defaults to now.

        Returns
        -------
        AggregatedRelease
            Components in the order of ``repos``, minus any repositories
            excluded under the ``exclude`` failure policy.

        Raises
        ------
        RepositoryFetchError
            Under the ``abort`` policy, when any repository failed to fetch.
        AggregationCancelledError
            When the configured timeout elapsed first.

        """
        repo_list = list(repos)
        self._events.log_run_started(
            version=target_tag, repository_count=len(repo_list)
        )
        started = time.perf_counter()
        try:
            inputs = await self._gather_inputs(target_tag, repo_list)
        except (RepositoryFetchError, AggregationCancelledError) as exc:
            self._events.log_run_failed(version=target_tag, error=exc)
            raise

        included = [repository for repository in repo_list if repository in inputs]
        release = aggregate(
            target_tag, included, inputs, generated_at=generated_at
        )
        for component in release.components:
            if isinstance(component.status, NoRelease):
                self._events.log_no_release(
                    repository=component.repository,
                    version=target_tag,
                    latest_version=component.status.latest_version,
                )

        self._events.log_run_completed(
            release=release,
            duration=dt.timedelta(seconds=time.perf_counter() - started),
        )
        return release

    async def _gather_inputs(
        self, target_tag: str, repos: list[str]
    ) -> dict[str, RepositoryInputs]:
        semaphore = asyncio.Semaphore(self._config.concurrency)

        async def bounded_fetch(repository: str) -> RepositoryInputs:
            async with semaphore:
                return await self.fetch_inputs(target_tag, repository)

        coroutines = [bounded_fetch(repository) for repository in repos]
        timeout_s = self._config.timeout_s
        try:
            async with asyncio.timeout(timeout_s):
                gathered = await asyncio.gather(*coroutines, return_exceptions=True)
        except TimeoutError as exc:
            raise AggregationCancelledError.timed_out(
                typ.cast("float", timeout_s)
            ) from exc

        return self._apply_failure_policy(target_tag, repos, gathered)

    def _apply_failure_policy(
        self,
        target_tag: str,
        repos: list[str],
        gathered: list[RepositoryInputs | BaseException],
    ) -> dict[str, RepositoryInputs]:
        inputs: dict[str, RepositoryInputs] = {}
        failures: list[tuple[str, Exception]] = []
        for repository, result in zip(repos, gathered, strict=True):
            if isinstance(result, Exception):
                self._events.log_fetch_failed(repository=repository, error=result)
                failures.append((repository, result))
            elif isinstance(result, BaseException):
                # Re-raise system-level exceptions (e.g., KeyboardInterrupt) immediately
                raise result
            else:
                inputs[repository] = result

        if not failures:
            return inputs
        if self._config.failure_policy is FetchFailurePolicy.ABORT:
            raise RepositoryFetchError(failures)
        for repository, _ in failures:
            self._events.log_excluded(repository=repository, version=target_tag)
        return inputs
