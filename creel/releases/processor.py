"""Build one repository's component release from its facts.

A repository without the target release is not a failure: the processor
reports it as :class:`~creel.releases.models.NoRelease`, carrying the latest
release the repository does have, so one lagging repository never aborts
aggregation of the others.
"""

from __future__ import annotations

import collections
import typing as typ

from .classification import (
    classify,
    clean_summary,
    extract_issue_numbers,
    extract_pr_number,
)
from .errors import ReleaseNotFoundError
from .models import (
    CommitFact,
    CommitType,
    ComponentRelease,
    EnrichedCommit,
    NoRelease,
    ReleaseFact,
    Released,
    ReleaseStats,
)
from .resolver import latest_release, resolve

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def enrich_commit(commit: CommitFact) -> EnrichedCommit:
    """Classify ``commit`` and attach its derived fields.

    Pull request and issue references supplied by the source take
    precedence; otherwise they are parsed from the commit message.
    """
    classification = classify(commit.message)
    pr_number = (
        commit.pr_number
        if commit.pr_number is not None
        else extract_pr_number(commit.message)
    )
    issue_numbers = commit.issue_numbers or extract_issue_numbers(commit.message)
    return EnrichedCommit(
        sha=commit.sha,
        message=commit.message,
        author=commit.author,
        committed_at=commit.committed_at,
        commit_type=classification.commit_type,
        raw_type=classification.raw_type,
        scope=classification.scope,
        breaking=classification.breaking,
        summary=clean_summary(commit.message),
        pr_number=pr_number,
        issue_numbers=tuple(issue_numbers),
    )


def _stats_key(commit: EnrichedCommit) -> str:
    """Return the ``type_counts`` key for ``commit``.

    Known types use their token; ``Other`` commits keep their raw token as
    ``other:<raw>`` so ``chore`` and ``style`` stay apart.
    """
    if commit.commit_type is CommitType.OTHER and commit.raw_type:
        return f"{CommitType.OTHER.value}:{commit.raw_type}"
    return commit.commit_type.value


def compute_stats(commits: cabc.Sequence[EnrichedCommit]) -> ReleaseStats:
    """Fold enriched commits into per-type counters and a contributor set."""
    type_counts: collections.Counter[str] = collections.Counter()
    contributors: set[str] = set()
    breaking = 0
    for commit in commits:
        type_counts[_stats_key(commit)] += 1
        if commit.author:
            contributors.add(commit.author)
        if commit.breaking:
            breaking += 1
    return ReleaseStats(
        commit_count=len(commits),
        contributors=tuple(sorted(contributors)),
        type_counts=dict(sorted(type_counts.items())),
        breaking_changes=breaking,
    )


def _no_release(history: cabc.Sequence[ReleaseFact]) -> NoRelease:
    latest = latest_release(history)
    if latest is None:
        return NoRelease()
    return NoRelease(latest_version=latest.tag, latest_date=latest.created_at)


def process_component(
    repository: str,
    target_tag: str,
    release_history: cabc.Sequence[ReleaseFact],
    commits_between: cabc.Sequence[CommitFact],
) -> ComponentRelease:
    """Produce the :class:`ComponentRelease` for one repository.

    Parameters
    ----------
    repository
        Repository name as requested by the caller.
    target_tag
        Version tag being aggregated.
    release_history
        All known releases of the repository, in any order.
    commits_between
        Commits between the previous and target releases in chronological
        order. An empty sequence means "no changes".

    Returns
    -------
    ComponentRelease
        ``Released`` when the target tag exists, otherwise ``NoRelease``.
        This function never raises for missing releases.

    """
    try:
        resolved = resolve(release_history, target_tag)
    except ReleaseNotFoundError:
        return ComponentRelease(
            repository=repository, status=_no_release(release_history)
        )

    commits = tuple(enrich_commit(commit) for commit in commits_between)
    current = resolved.current
    status = Released(
        current=current.tag,
        previous=resolved.previous.tag if resolved.previous is not None else None,
        release_date=current.created_at,
        commits=commits,
        notes=current.body,
        stats=compute_stats(commits),
    )
    return ComponentRelease(repository=repository, status=status)
