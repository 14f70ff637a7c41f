"""Immutable structures describing an aggregated multi-repository release.

Facts (:class:`ReleaseFact`, :class:`CommitFact`) arrive from a source-control
facade. The component processor enriches them into :class:`EnrichedCommit`
values and a :data:`ComponentStatus` per repository, and the aggregation
engine assembles everything into an :class:`AggregatedRelease`.

Every structure is a frozen ``msgspec.Struct`` so the finished release can be
handed to any renderer, or encoded straight to JSON, without defensive copies.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum
import typing as typ

import msgspec


class CommitType(enum.StrEnum):
    """Conventional-commit categories recognised by the classifier.

    ``OTHER`` covers both unknown type tokens and messages without a
    conventional header; the raw token is kept alongside it.
    """

    FEATURE = "feat"
    FIX = "fix"
    DOCS = "docs"
    PERFORMANCE = "perf"
    REFACTOR = "refactor"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    OTHER = "other"


class ReleaseFact(msgspec.Struct, kw_only=True, frozen=True):
    """One published release of a repository.

    Attributes
    ----------
    tag
        Tag name the release points at (e.g. ``v1.2.0``).
    created_at
        When the release was created.
    body
        Release notes written on the hosting platform, if any.
    name
        Display name of the release, if different from the tag.

    """

    tag: str
    created_at: dt.datetime
    body: str | None = None
    name: str | None = None


class CommitFact(msgspec.Struct, kw_only=True, frozen=True):
    """One commit between two releases.

    Attributes
    ----------
    sha
        Commit content hash.
    message
        Full commit message including body and footers.
    author
        Author identity (login where known, otherwise name).
    committed_at
        Commit timestamp.
    pr_number
        Linked pull request number, when the source knows it.
    issue_numbers
        Linked issue numbers, when the source knows them.

    """

    sha: str
    message: str
    author: str
    committed_at: dt.datetime
    pr_number: int | None = None
    issue_numbers: tuple[int, ...] = ()


class CommitClassification(msgspec.Struct, kw_only=True, frozen=True):
    """Outcome of parsing a commit message header.

    Attributes
    ----------
    commit_type
        Category taken from the type token.
    raw_type
        Lower-cased type token as written; empty when the message has no
        conventional-commit header.
    scope
        Optional scope in parentheses.
    breaking
        Whether the commit is marked as a breaking change.
    description
        Header description, or the first line when there is no header.

    """

    commit_type: CommitType
    raw_type: str = ""
    scope: str | None = None
    breaking: bool = False
    description: str = ""


class EnrichedCommit(msgspec.Struct, kw_only=True, frozen=True):
    """A commit fact together with its derived classification."""

    sha: str
    message: str
    author: str
    committed_at: dt.datetime
    commit_type: CommitType
    raw_type: str = ""
    scope: str | None = None
    breaking: bool = False
    summary: str = ""
    pr_number: int | None = None
    issue_numbers: tuple[int, ...] = ()

    @property
    def short_sha(self) -> str:
        """Return the abbreviated seven-character hash."""
        return self.sha[:7]


class ReleaseStats(msgspec.Struct, kw_only=True, frozen=True):
    """Aggregate statistics over one component's commits.

    Attributes
    ----------
    commit_count
        Number of commits in the release.
    contributors
        Unique author identities, sorted for stable output.
    type_counts
        Commit count per :class:`CommitType` value. ``Other`` commits are
        keyed ``"other:<raw>"`` by their raw token, or ``"other"`` when the
        message had no type token.
    breaking_changes
        Number of commits flagged as breaking.

    """

    commit_count: int = 0
    contributors: tuple[str, ...] = ()
    type_counts: dict[str, int] = msgspec.field(default_factory=dict)
    breaking_changes: int = 0

    def count_for(self, commit_type: CommitType) -> int:
        """Return the number of commits of ``commit_type``.

        ``CommitType.OTHER`` sums every ``other`` and ``other:<raw>`` key.
        """
        if commit_type is not CommitType.OTHER:
            return self.type_counts.get(commit_type.value, 0)
        prefix = f"{CommitType.OTHER.value}:"
        return sum(
            count
            for key, count in self.type_counts.items()
            if key == CommitType.OTHER.value or key.startswith(prefix)
        )

    @property
    def features(self) -> int:
        """Return the number of feature commits."""
        return self.count_for(CommitType.FEATURE)

    @property
    def fixes(self) -> int:
        """Return the number of fix commits."""
        return self.count_for(CommitType.FIX)


class Released(msgspec.Struct, kw_only=True, frozen=True, tag="released"):
    """Status of a repository that published the target release.

    ``current`` always equals the requested target tag. ``previous`` is
    ``None`` for an initial release.
    """

    current: str
    release_date: dt.datetime
    previous: str | None = None
    commits: tuple[EnrichedCommit, ...] = ()
    notes: str | None = None
    stats: ReleaseStats = msgspec.field(default_factory=ReleaseStats)

    @property
    def is_initial(self) -> bool:
        """Return True when no earlier release exists."""
        return self.previous is None


class NoRelease(msgspec.Struct, kw_only=True, frozen=True, tag="no_release"):
    """Status of a repository without the target release.

    Carries the most recent release the repository does have, if any.
    """

    latest_version: str | None = None
    latest_date: dt.datetime | None = None


ComponentStatus: typ.TypeAlias = Released | NoRelease


class ComponentRelease(msgspec.Struct, kw_only=True, frozen=True):
    """One repository's contribution to the aggregated release."""

    repository: str
    status: ComponentStatus

    @property
    def released(self) -> bool:
        """Return True when the repository published the target release."""
        return isinstance(self.status, Released)


class ReleaseSummary(msgspec.Struct, kw_only=True, frozen=True):
    """Cross-repository totals.

    Attributes
    ----------
    total_repos
        Number of repositories requested.
    updated_repos
        Number of repositories with a ``Released`` status.
    total_commits
        Sum of commit counts over released repositories.
    contributors
        Size of the union of contributor identities.
    contributor_names
        The union itself, sorted.

    """

    total_repos: int = 0
    updated_repos: int = 0
    total_commits: int = 0
    contributors: int = 0
    contributor_names: tuple[str, ...] = ()


class AggregatedRelease(msgspec.Struct, kw_only=True, frozen=True):
    """The complete release snapshot handed to renderers.

    Attributes
    ----------
    version
        Target version tag.
    generated_at
        When the aggregate was assembled.
    components
        One entry per requested repository, in request order.
    summary
        Cross-repository totals.

    """

    version: str
    generated_at: dt.datetime
    components: tuple[ComponentRelease, ...] = ()
    summary: ReleaseSummary = msgspec.field(default_factory=ReleaseSummary)


class RepositoryInputs(msgspec.Struct, kw_only=True, frozen=True):
    """Facts gathered for one repository before aggregation.

    Attributes
    ----------
    release_history
        Every known release of the repository, in any order.
    commits
        Commits between the previous and target releases, chronological.
        Empty when the range is unknown or there is no target release.

    """

    release_history: tuple[ReleaseFact, ...] = ()
    commits: tuple[CommitFact, ...] = ()
