"""Plain-data view of an aggregated release for template rendering.

Templates receive builtins only (``dict``, ``list``, ``str``, numbers), built
with :func:`msgspec.to_builtins` and extended with the derived values the
Markdown renderer computes inline: short hashes, grouped commits, link URLs
and formatted dates.
"""

from __future__ import annotations

import typing as typ

import msgspec

from creel.releases.models import NoRelease, Released

from .grouping import display_summary, group_commits

if typ.TYPE_CHECKING:
    import datetime as dt

    from creel.releases.models import (
        AggregatedRelease,
        ComponentRelease,
        EnrichedCommit,
    )

    from .formats import RenderOptions


def _format_date(value: dt.datetime | None) -> str | None:
    return value.strftime("%Y-%m-%d") if value is not None else None


def _commit_context(
    commit: EnrichedCommit, options: RenderOptions
) -> dict[str, typ.Any]:
    data = msgspec.to_builtins(commit)
    data["short_sha"] = commit.short_sha
    data["display_summary"] = display_summary(commit, link_pr=options.include_prs)
    return data


def _component_context(
    component: ComponentRelease, options: RenderOptions
) -> dict[str, typ.Any]:
    status = component.status
    data: dict[str, typ.Any] = {
        "repository": component.repository,
        "repository_url": options.repository_url(component.repository),
        "released": component.released,
    }
    data.update(msgspec.to_builtins(status))
    match status:
        case Released():
            data["release_date"] = _format_date(status.release_date)
            data["commits"] = [
                _commit_context(commit, options) for commit in status.commits
            ]
            data["groups"] = [
                {
                    "commit_type": group.commit_type.value,
                    "label": group.label,
                    "commits": [
                        _commit_context(commit, options) for commit in group.commits
                    ],
                }
                for group in group_commits(status.commits, options.commit_type_labels)
            ]
            data["stats"]["features"] = status.stats.features
            data["stats"]["fixes"] = status.stats.fixes
        case NoRelease():
            data["latest_date"] = _format_date(status.latest_date)
        case _ as unreachable:
            typ.assert_never(unreachable)
    return data


def build_release_context(
    release: AggregatedRelease, options: RenderOptions
) -> dict[str, typ.Any]:
    """Return the template context for ``release``.

    Top-level keys are ``version``, ``date`` (``YYYY-MM-DD``),
    ``generated_at`` (ISO 8601), ``summary``, ``components`` and
    ``options``. Each component carries ``type`` (``released`` or
    ``no_release``) alongside its status fields.
    """
    return {
        "version": release.version,
        "date": _format_date(release.generated_at),
        "generated_at": release.generated_at.isoformat(),
        "summary": msgspec.to_builtins(release.summary),
        "components": [
            _component_context(component, options)
            for component in release.components
        ],
        "options": {
            "include_prs": options.include_prs,
            "include_issues": options.include_issues,
            "categorize_commits": options.categorize_commits,
            "include_stats": options.include_stats,
        },
    }
