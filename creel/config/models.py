"""Typed configuration file structures.

Every section is optional; anything omitted takes the defaults below.

.. code-block:: yaml

    github:
      org: acme
    repos:
      include: [api, web, worker, sandbox]
      exclude: ["sandbox*"]
    output:
      format: markdown
      path: releases
    features:
      include_prs: true
      include_issues: true
      categorize_commits: true
      include_stats: true
    commit_types:
      feat: "🚀 New"
    aggregation:
      concurrency: 8
      failure_policy: exclude

"""

from __future__ import annotations

import msgspec

from creel.releases.config import AggregationConfig, FetchFailurePolicy
from creel.reporting.formats import OutputFormat, RenderOptions


class GitHubSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Hosting settings.

    Attributes
    ----------
    org : str, optional
        Organisation qualifying bare repository names.
    api_url : str, optional
        REST API base URL for GitHub Enterprise installations.
    web_url : str
        Web base URL used for links in rendered output.

    """

    org: str | None = None
    api_url: str | None = None
    web_url: str = "https://github.com"


class RepositorySelection(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Repositories to aggregate.

    ``exclude`` entries are shell-style globs matched against the names in
    ``include``.
    """

    include: list[str] = msgspec.field(default_factory=list)
    exclude: list[str] = msgspec.field(default_factory=list)


class OutputSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Where and how rendered releases are written."""

    format: str = "markdown"
    path: str = "releases"
    template: str | None = None


class FeatureToggles(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Rendering features; none of them change the aggregated data."""

    categorize_commits: bool = True
    include_prs: bool = True
    include_issues: bool = True
    include_stats: bool = True


class AggregationSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Fetch concurrency, failure policy and time budget."""

    concurrency: int = 4
    failure_policy: str = "abort"
    timeout_s: float | None = None


class CreelConfig(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Root configuration document."""

    github: GitHubSettings = msgspec.field(default_factory=GitHubSettings)
    repos: RepositorySelection = msgspec.field(default_factory=RepositorySelection)
    output: OutputSettings = msgspec.field(default_factory=OutputSettings)
    features: FeatureToggles = msgspec.field(default_factory=FeatureToggles)
    commit_types: dict[str, str] = msgspec.field(default_factory=dict)
    aggregation: AggregationSettings = msgspec.field(
        default_factory=AggregationSettings
    )

    def output_format(self) -> OutputFormat:
        """Return the parsed output format."""
        return OutputFormat.parse(self.output.format)

    def render_options(self) -> RenderOptions:
        """Return renderer options built from the feature toggles."""
        features = self.features
        return RenderOptions(
            include_prs=features.include_prs,
            include_issues=features.include_issues,
            categorize_commits=features.categorize_commits,
            include_stats=features.include_stats,
            base_url=self.github.web_url,
            org=self.github.org,
            commit_type_labels=dict(self.commit_types),
        )

    def aggregation_config(self) -> AggregationConfig:
        """Return the aggregation service configuration."""
        settings = self.aggregation
        return AggregationConfig(
            concurrency=settings.concurrency,
            failure_policy=FetchFailurePolicy(settings.failure_policy.lower()),
            timeout_s=settings.timeout_s,
        )
