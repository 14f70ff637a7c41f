"""Assemble per-repository component releases into one aggregated release.

Repositories are processed independently; when ``max_workers`` is given the
processing runs on a thread pool. Either way the components come back in the
order the repositories were requested, because results are collected by
input index rather than completion order.

Usage
-----
>>> import datetime as dt
>>> from creel.releases import RepositoryInputs, aggregate
>>> release = aggregate(
...     "v1.0.0",
...     ["api"],
...     {"api": RepositoryInputs()},
...     generated_at=dt.datetime(2024, 7, 1, tzinfo=dt.UTC),
... )
>>> release.summary.updated_repos
0

"""

from __future__ import annotations

import concurrent.futures as cf
import typing as typ

from creel.common.time import utcnow

from .errors import MissingRepositoryInputError
from .models import (
    AggregatedRelease,
    ComponentRelease,
    NoRelease,
    Released,
    ReleaseSummary,
    RepositoryInputs,
)
from .processor import process_component

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt


def summarize(components: cabc.Sequence[ComponentRelease]) -> ReleaseSummary:
    """Compute cross-repository totals.

    Only ``Released`` components contribute commits and contributors; the
    contributor figure is the size of the union, not the sum, of each
    component's contributor set.
    """
    updated = 0
    total_commits = 0
    contributors: set[str] = set()
    for component in components:
        match component.status:
            case Released(stats=stats):
                updated += 1
                total_commits += stats.commit_count
                contributors.update(stats.contributors)
            case NoRelease():
                pass
            case _ as unreachable:
                typ.assert_never(unreachable)
    names = tuple(sorted(contributors))
    return ReleaseSummary(
        total_repos=len(components),
        updated_repos=updated,
        total_commits=total_commits,
        contributors=len(names),
        contributor_names=names,
    )


def _inputs_for(
    repos: cabc.Sequence[str],
    inputs: cabc.Mapping[str, RepositoryInputs],
) -> list[RepositoryInputs]:
    resolved: list[RepositoryInputs] = []
    for repository in repos:
        try:
            resolved.append(inputs[repository])
        except KeyError as exc:
            raise MissingRepositoryInputError(repository) from exc
    return resolved


def aggregate(
    target_tag: str,
    repos: cabc.Sequence[str],
    inputs: cabc.Mapping[str, RepositoryInputs],
    *,
    generated_at: dt.datetime | None = None,
    max_workers: int | None = None,
) -> AggregatedRelease:
    """Aggregate the target release across ``repos``.

    Parameters
    ----------
    target_tag
        Version tag being aggregated.
    repos
        Repositories in the order they should appear in the output.
    inputs
        Gathered facts keyed by repository name.
    generated_at
        Timestamp recorded on the aggregate; defaults to now. Pass a fixed
        value for byte-for-byte reproducible output.
    max_workers
        When set (at least 1), process repositories on a thread pool of this
        size. Output order is unaffected.

    Returns
    -------
    AggregatedRelease
        The complete release snapshot.

    Raises
    ------
    MissingRepositoryInputError
        If a repository in ``repos`` has no entry in ``inputs``.
    ValueError
        If ``max_workers`` is less than 1.

    """
    repo_inputs = _inputs_for(repos, inputs)

    def _process(index: int) -> ComponentRelease:
        facts = repo_inputs[index]
        return process_component(
            repos[index], target_tag, facts.release_history, facts.commits
        )

    indices = range(len(repos))
    if max_workers is None:
        components = tuple(_process(index) for index in indices)
    else:
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got: {max_workers}"
            raise ValueError(msg)
        # Executor.map yields results in submission order.
        with cf.ThreadPoolExecutor(max_workers=max_workers) as executor:
            components = tuple(executor.map(_process, indices))

    return AggregatedRelease(
        version=target_tag,
        generated_at=generated_at or utcnow(),
        components=components,
        summary=summarize(components),
    )
