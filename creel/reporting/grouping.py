"""Group a component's commits under per-type headings."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from creel.releases.classification import display_order, label_for

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from creel.releases.models import CommitType, EnrichedCommit

_PR_SUFFIX_PATTERN = re.compile(r"\s*\(#\d+\)\s*$")


@dc.dataclass(frozen=True, slots=True)
class CommitGroup:
    """Commits sharing one type, with the heading they are listed under."""

    commit_type: CommitType
    label: str
    commits: tuple[EnrichedCommit, ...]


def group_commits(
    commits: cabc.Sequence[EnrichedCommit],
    labels: cabc.Mapping[str, str] | None = None,
) -> list[CommitGroup]:
    """Return non-empty groups in display order.

    Commit order within a group follows ``commits``.
    """
    buckets: dict[CommitType, list[EnrichedCommit]] = {}
    for commit in commits:
        buckets.setdefault(commit.commit_type, []).append(commit)
    return [
        CommitGroup(
            commit_type=commit_type,
            label=label_for(commit_type, labels),
            commits=tuple(buckets[commit_type]),
        )
        for commit_type in display_order()
        if commit_type in buckets
    ]


def display_summary(commit: EnrichedCommit, *, link_pr: bool) -> str:
    """Return the commit summary, dropping a trailing ``(#N)`` when linked.

    Falls back to the short hash when the message was empty.
    """
    summary = commit.summary
    if link_pr and commit.pr_number is not None:
        summary = _PR_SUFFIX_PATTERN.sub("", summary)
    return summary or commit.short_sha
