"""Output formats and rendering options for aggregated releases.

Usage
-----
>>> OutputFormat.parse("MD")
<OutputFormat.MARKDOWN: 'markdown'>
>>> OutputFormat.parse("html").extension
'html'

"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from creel.common.slug import qualify_repository, repo_slug

from .errors import RenderError

_DEFAULT_BASE_URL = "https://github.com"


class OutputFormat(enum.StrEnum):
    """Supported renderer outputs."""

    MARKDOWN = "markdown"
    JSON = "json"
    HTML = "html"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        """Parse a format name case-insensitively; ``md`` means Markdown.

        Raises
        ------
        RenderError
            If ``value`` names no supported format.

        """
        normalized = value.strip().lower()
        if normalized == "md":
            return cls.MARKDOWN
        try:
            return cls(normalized)
        except ValueError as exc:
            raise RenderError.unknown_format(value) from exc

    @property
    def extension(self) -> str:
        """Return the file extension written for this format."""
        return _EXTENSIONS[self]


_EXTENSIONS: dict[OutputFormat, str] = {
    OutputFormat.MARKDOWN: "md",
    OutputFormat.JSON: "json",
    OutputFormat.HTML: "html",
}


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Feature toggles and link settings shared by the renderers.

    Attributes
    ----------
    include_prs
        Link pull requests referenced by commits.
    include_issues
        Link issues referenced by commits.
    categorize_commits
        Group changes under per-type headings; otherwise list them flat.
    include_stats
        Show per-component feature, fix and breaking-change counts.
    base_url
        Web URL of the hosting service used to build links.
    org
        Organisation used to qualify bare repository names in links.
    commit_type_labels
        Overrides for the per-type section headings, keyed by type token.

    """

    include_prs: bool = True
    include_issues: bool = True
    categorize_commits: bool = True
    include_stats: bool = True
    base_url: str = _DEFAULT_BASE_URL
    org: str | None = None
    commit_type_labels: typ.Mapping[str, str] = dc.field(default_factory=dict)

    def repository_url(self, repository: str) -> str | None:
        """Return the web URL of ``repository``, or ``None`` if unqualified."""
        try:
            owner, name = qualify_repository(repository, self.org)
        except ValueError:
            return None
        return f"{self.base_url.rstrip('/')}/{repo_slug(owner, name)}"
