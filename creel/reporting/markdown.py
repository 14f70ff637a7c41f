"""Markdown renderer for aggregated releases.

The document opens with the release title and cross-repository summary,
then one section per component in request order, separated by horizontal
rules.

Usage
-----
>>> from creel.reporting.markdown import render_release_markdown
>>> md = render_release_markdown(release)

"""

from __future__ import annotations

import typing as typ

from creel.releases.models import NoRelease, Released

from .formats import RenderOptions
from .grouping import display_summary, group_commits

if typ.TYPE_CHECKING:
    import datetime as dt

    from creel.releases.models import (
        AggregatedRelease,
        ComponentRelease,
        EnrichedCommit,
    )


def _format_date(value: dt.datetime) -> str:
    """Format a datetime as an ISO date string (YYYY-MM-DD)."""
    return value.strftime("%Y-%m-%d")


def _render_title(lines: list[str], release: AggregatedRelease) -> None:
    lines.append(f"# Release {release.version}")
    lines.append("")
    lines.append(f"📅 **Date:** {_format_date(release.generated_at)}")
    lines.append("")


def _render_summary(lines: list[str], release: AggregatedRelease) -> None:
    summary = release.summary
    lines.append("## 📊 Summary")
    lines.append("")
    lines.append(f"- **Total Repositories:** {summary.total_repos}")
    lines.append(f"- **Updated Repositories:** {summary.updated_repos}")
    lines.append(f"- **Total Commits:** {summary.total_commits}")
    lines.append(f"- **Contributors:** {summary.contributors}")
    lines.append("")
    lines.append("---")
    lines.append("")


def _render_commit(
    commit: EnrichedCommit,
    options: RenderOptions,
    repo_url: str | None,
) -> str:
    """Return one bullet line for ``commit``."""
    parts: list[str] = []
    if commit.breaking:
        parts.append("**BREAKING**")
    text = display_summary(commit, link_pr=options.include_prs)
    if commit.scope:
        text = f"**{commit.scope}:** {text}"
    parts.append(text)

    if repo_url is not None:
        parts.append(f"([`{commit.short_sha}`]({repo_url}/commit/{commit.sha}))")
    else:
        parts.append(f"(`{commit.short_sha}`)")

    if options.include_prs and commit.pr_number is not None:
        number = commit.pr_number
        parts.append(
            f"([#{number}]({repo_url}/pull/{number}))"
            if repo_url is not None
            else f"(#{number})"
        )

    if options.include_issues and commit.issue_numbers:
        refs = [
            f"[#{number}]({repo_url}/issues/{number})"
            if repo_url is not None
            else f"#{number}"
            for number in commit.issue_numbers
        ]
        parts.append(f"closes {', '.join(refs)}")

    return "- " + " ".join(parts)


def _render_changes(
    lines: list[str],
    status: Released,
    options: RenderOptions,
    repo_url: str | None,
) -> None:
    if not status.commits:
        return
    lines.append("### 🎯 Changes")
    lines.append("")
    if not options.categorize_commits:
        lines.extend(
            _render_commit(commit, options, repo_url) for commit in status.commits
        )
        lines.append("")
        return
    for group in group_commits(status.commits, options.commit_type_labels):
        lines.append(f"#### {group.label}")
        lines.extend(
            _render_commit(commit, options, repo_url) for commit in group.commits
        )
        lines.append("")


def _render_released(
    lines: list[str],
    repository: str,
    status: Released,
    options: RenderOptions,
) -> None:
    lines.append(f"**Version:** `{status.current}`  ")
    if status.previous is not None:
        lines.append(f"**Previous:** `{status.previous}`  ")
    else:
        lines.append("**Previous:** *Initial Release*  ")
    lines.append(f"**Release Date:** {_format_date(status.release_date)}  ")
    lines.append(f"**Commits:** {status.stats.commit_count}  ")
    lines.append("")

    if options.include_stats:
        stats = status.stats
        lines.append(
            f"**Features:** {stats.features} | **Fixes:** {stats.fixes}"
            f" | **Breaking Changes:** {stats.breaking_changes}"
        )
        lines.append("")

    _render_changes(lines, status, options, options.repository_url(repository))

    if status.notes:
        lines.append("### 📝 Release Notes")
        lines.append("")
        lines.append(status.notes.strip())
        lines.append("")

    if status.stats.contributors:
        lines.append("### 👥 Contributors")
        lines.extend(f"- @{name}" for name in status.stats.contributors)
        lines.append("")


def _render_no_release(lines: list[str], status: NoRelease) -> None:
    lines.append("*No changes in this release*")
    lines.append("")
    if status.latest_version is not None:
        latest = f"Latest version: `{status.latest_version}`"
        if status.latest_date is not None:
            latest += f" ({_format_date(status.latest_date)})"
        lines.append(latest)
        lines.append("")


def _render_component(
    lines: list[str],
    component: ComponentRelease,
    options: RenderOptions,
) -> None:
    lines.append(f"## {component.repository}")
    lines.append("")
    match component.status:
        case Released() as status:
            _render_released(lines, component.repository, status, options)
        case NoRelease() as status:
            _render_no_release(lines, status)
        case _ as unreachable:
            typ.assert_never(unreachable)
    lines.append("---")
    lines.append("")


def render_release_markdown(
    release: AggregatedRelease,
    options: RenderOptions | None = None,
) -> str:
    """Render an aggregated release as a Markdown document.

    Parameters
    ----------
    release
        The finished aggregate.
    options
        Feature toggles and link settings; defaults enable every feature.

    Returns
    -------
    str
        A complete Markdown document.

    """
    opts = options or RenderOptions()
    lines: list[str] = []
    _render_title(lines, release)
    _render_summary(lines, release)
    for component in release.components:
        _render_component(lines, component, opts)
    return "\n".join(lines)
