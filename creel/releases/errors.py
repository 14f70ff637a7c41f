"""Errors raised by the release aggregation core and its driver."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class AggregationError(Exception):
    """Base class for release aggregation errors."""


class ReleaseNotFoundError(AggregationError):
    """Raised by the resolver when the target tag is absent from a history.

    The component processor converts this into a ``NoRelease`` status; it
    never escapes the aggregation core.
    """

    def __init__(self, tag: str) -> None:
        """Initialise with the tag that could not be found."""
        self.tag = tag
        super().__init__(f"Release not found for tag: {tag}")


class MissingRepositoryInputError(AggregationError):
    """Raised when a requested repository has no gathered inputs."""

    def __init__(self, repository: str) -> None:
        """Initialise with the repository lacking inputs."""
        self.repository = repository
        super().__init__(f"No inputs supplied for repository: {repository}")


class RepositoryFetchError(AggregationError):
    """Raised when fetching release facts failed for one or more repositories.

    Parameters
    ----------
    failures
        ``(repository, exception)`` pairs in request order.

    Attributes
    ----------
    failures
        Immutable tuple of the failed repositories and their errors.

    """

    failures: tuple[tuple[str, Exception], ...]

    def __init__(self, failures: cabc.Sequence[tuple[str, Exception]]) -> None:
        """Initialise with the per-repository failures."""
        self.failures = tuple(failures)
        names = ", ".join(repository for repository, _ in self.failures)
        message = (
            f"Release fetch failed for {len(self.failures)} repository(ies): {names}"
        )
        super().__init__(message)

    @property
    def repositories(self) -> tuple[str, ...]:
        """Return the names of the repositories that failed."""
        return tuple(repository for repository, _ in self.failures)


class AggregationCancelledError(AggregationError):
    """Raised when aggregation was abandoned before every repository finished."""

    @classmethod
    def timed_out(cls, timeout_s: float) -> AggregationCancelledError:
        """Return an error for an aggregation exceeding its time budget."""
        return cls(f"Release aggregation exceeded timeout of {timeout_s:g}s")
