"""ReleaseSource protocol for fetching release and commit facts."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from .models import CommitFact, ReleaseFact


@typ.runtime_checkable
class ReleaseSource(typ.Protocol):
    """Port through which the aggregation service reads source control.

    Implementations own network retries, pagination and rate-limit backoff.
    Anything they cannot recover from is raised; the aggregation service
    then applies its failure policy.

    Examples
    --------
    >>> from creel.github import GitHubReleaseClient, GitHubRestConfig
    >>> client = GitHubReleaseClient(GitHubRestConfig(token="t", org="acme"))
    >>> isinstance(client, ReleaseSource)
    True

    """

    async def list_releases(self, repository: str) -> list[ReleaseFact]:
        """Return every published release of ``repository`` in any order."""
        ...

    async def commits_between(
        self,
        repository: str,
        from_tag: str | None,
        to_tag: str,
    ) -> list[CommitFact]:
        """Return commits reachable from ``to_tag`` but not ``from_tag``.

        Parameters
        ----------
        repository
            Repository name or ``owner/name`` slug.
        from_tag
            Previous release tag; ``None`` returns every commit up to
            ``to_tag``.
        to_tag
            Target release tag.

        Returns
        -------
        list[CommitFact]
            Commits in chronological order, oldest first.

        """
        ...
