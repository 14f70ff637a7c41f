"""Command-line interface for aggregating releases across repositories.

Usage
-----
Generate release notes for ``v1.2.0`` across three repositories::

    export CREEL_GITHUB_TOKEN=...
    creel generate --tag v1.2.0 --repos api,web,worker --org acme

Check that every repository published a release::

    creel check --tag v1.2.0 --repos api,web,worker --org acme

List recent releases::

    creel list --repos api,web --limit 5 --org acme

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import os
import sys
import typing as typ
from pathlib import Path

import httpx
from cyclopts import App, Parameter

from creel import __version__
from creel.config import ConfigError, CreelConfig, load_config, select_repositories
from creel.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubReleaseClient,
    GitHubResponseShapeError,
    GitHubRestConfig,
)
from creel.logging import (
    LOG_LEVEL_ENV_VAR,
    configure_logging,
    get_logger,
    log_warning,
)
from creel.releases import (
    AggregationCancelledError,
    AggregationConfig,
    FetchFailurePolicy,
    ReleaseAggregationService,
    ReleaseSource,
    RepositoryFetchError,
)
from creel.reporting import (
    FilesystemReleaseSink,
    OutputFormat,
    RenderError,
    RenderOptions,
    render_release,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from creel.releases import AggregatedRelease, ReleaseFact

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

_FETCH_ERRORS = (
    GitHubAPIError,
    GitHubResponseShapeError,
    httpx.HTTPError,
    ValueError,
)
_NO_REPOS_MESSAGE = "No repositories selected; pass --repos or set repos.include"

app = App(
    name="creel",
    help="Aggregate release notes from multiple GitHub repositories",
    version=__version__,
)


class ReleaseClient(ReleaseSource, typ.Protocol):
    """Operations the commands need from a GitHub client."""

    async def list_releases(
        self, repository: str, *, limit: int | None = None
    ) -> list[ReleaseFact]: ...

    async def get_release(self, repository: str, tag: str) -> ReleaseFact | None: ...

    async def aclose(self) -> None: ...


def build_client(config: CreelConfig, org: str | None) -> ReleaseClient:
    """Create the GitHub client used by every command.

    Raises
    ------
    GitHubConfigError
        If no token is configured.

    """
    rest_config = GitHubRestConfig.from_env(
        org=org or config.github.org, api_url=config.github.api_url
    )
    return GitHubReleaseClient(rest_config)


def _split_repos(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _load(config_path: Path | None) -> CreelConfig | None:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        print(f"Configuration {config_path} is invalid:", file=sys.stderr)
        for issue in exc.issues:
            print(f"  - {issue}", file=sys.stderr)
        return None


def _resolve_repos(raw: str | None, config: CreelConfig) -> list[str]:
    include = _split_repos(raw) or config.repos.include
    return select_repositories(include, config.repos.exclude)


def _render_options(
    config: CreelConfig,
    *,
    org: str | None,
    include_prs: bool | None,
    include_issues: bool | None,
    categorize: bool | None,
) -> RenderOptions:
    overrides = {
        "include_prs": include_prs,
        "include_issues": include_issues,
        "categorize_commits": categorize,
        "org": org,
    }
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dc.replace(config.render_options(), **changes)


def _aggregation_config(
    config: CreelConfig,
    concurrency: int | None,
    failure_policy: str | None,
    timeout_s: float | None,
) -> AggregationConfig:
    base = config.aggregation_config()
    return AggregationConfig(
        concurrency=concurrency if concurrency is not None else base.concurrency,
        failure_policy=(
            FetchFailurePolicy(failure_policy.strip().lower())
            if failure_policy
            else base.failure_policy
        ),
        timeout_s=timeout_s if timeout_s is not None else base.timeout_s,
    )


@app.command
def generate(  # noqa: PLR0913
    *,
    tag: str,
    repos: str | None = None,
    config: Path | None = None,
    org: typ.Annotated[str | None, Parameter(env_var="CREEL_GITHUB_ORG")] = None,
    output: Path | None = None,
    output_dir: Path | None = None,
    fmt: typ.Annotated[str | None, Parameter(name="--format")] = None,
    include_prs: bool | None = None,
    include_issues: bool | None = None,
    categorize: bool | None = None,
    template: Path | None = None,
    concurrency: typ.Annotated[
        int | None, Parameter(env_var="CREEL_CONCURRENCY")
    ] = None,
    failure_policy: typ.Annotated[
        str | None, Parameter(env_var="CREEL_FAILURE_POLICY")
    ] = None,
    timeout_s: typ.Annotated[
        float | None, Parameter(env_var="CREEL_TIMEOUT_S")
    ] = None,
) -> int:
    """Generate aggregated release notes for a version.

    Output goes to ``--output`` when given, otherwise to ``--output-dir``
    (or the configuration file's ``output.path``) as ``{tag}.{ext}`` plus
    ``latest.{ext}``. Without either, and without a configuration file, the
    document is printed.

    Args:
        tag: Version tag to aggregate.
        repos: Comma-separated repository names; defaults to the
            configuration file's ``repos.include``.
        config: YAML configuration file.
        org: Organisation qualifying bare repository names.
        output: File to write the rendered document to.
        output_dir: Directory receiving versioned and latest copies.
        fmt: Output format (markdown, md, json, html).
        include_prs: Link pull requests.
        include_issues: Link issues.
        categorize: Group commits by type.
        template: Custom Jinja2 template.
        concurrency: Maximum repositories fetched at once.
        failure_policy: ``abort`` or ``exclude`` when a fetch fails.
        timeout_s: Overall time budget in seconds.

    Returns:
        Exit code (0 for success, non-zero for failure).

    """
    settings = _load(config)
    if settings is None:
        return EXIT_USAGE

    repositories = _resolve_repos(repos, settings)
    if not repositories:
        print(_NO_REPOS_MESSAGE, file=sys.stderr)
        return EXIT_USAGE

    try:
        output_format = OutputFormat.parse(fmt or settings.output.format)
        aggregation = _aggregation_config(
            settings, concurrency, failure_policy, timeout_s
        )
    except (RenderError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    options = _render_options(
        settings,
        org=org,
        include_prs=include_prs,
        include_issues=include_issues,
        categorize=categorize,
    )
    template_path = template or (
        Path(settings.output.template) if settings.output.template else None
    )

    try:
        client = build_client(settings, org)
    except GitHubConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        release = asyncio.run(_aggregate(client, aggregation, tag, repositories))
    except RepositoryFetchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        for repository, error in exc.failures:
            print(f"  - {repository}: {error}", file=sys.stderr)
        return EXIT_FAILURE
    except AggregationCancelledError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        content = render_release(
            release, output_format, options, template_path=template_path
        )
    except RenderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    target_dir = output_dir or (Path(settings.output.path) if config else None)
    _emit(content, tag=tag, fmt=output_format, output=output, target_dir=target_dir)
    return EXIT_OK


def _emit(
    content: str,
    *,
    tag: str,
    fmt: OutputFormat,
    output: Path | None,
    target_dir: Path | None,
) -> None:
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
        print(f"Release notes written to {output}")
        return
    if target_dir is not None:
        sink = FilesystemReleaseSink(target_dir)
        written = asyncio.run(sink.write_release(content, version=tag, fmt=fmt))
        print(f"Release notes written to {written}")
        return
    print(content)


async def _aggregate(
    client: ReleaseClient,
    aggregation: AggregationConfig,
    tag: str,
    repositories: cabc.Sequence[str],
) -> AggregatedRelease:
    try:
        service = ReleaseAggregationService(client, config=aggregation)
        return await service.run(tag, repositories)
    finally:
        await client.aclose()


@app.command
def check(
    *,
    tag: str,
    repos: str | None = None,
    config: Path | None = None,
    org: typ.Annotated[str | None, Parameter(env_var="CREEL_GITHUB_ORG")] = None,
) -> int:
    """Check that every repository has published a release.

    Args:
        tag: Version tag to look for.
        repos: Comma-separated repository names.
        config: YAML configuration file.
        org: Organisation qualifying bare repository names.

    Returns:
        Exit code (0 when every repository has the release, 1 otherwise).

    """
    settings = _load(config)
    if settings is None:
        return EXIT_USAGE
    repositories = _resolve_repos(repos, settings)
    if not repositories:
        print(_NO_REPOS_MESSAGE, file=sys.stderr)
        return EXIT_USAGE
    try:
        client = build_client(settings, org)
    except GitHubConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        found = asyncio.run(_check(client, tag, repositories))
    except _FETCH_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Checking release {tag} for repositories: {', '.join(repositories)}")
    for repository, present in zip(repositories, found, strict=True):
        if present:
            print(f"✓ {repository}: Release {tag} found")
        else:
            print(f"✗ {repository}: Release {tag} not found")
    return EXIT_OK if all(found) else EXIT_FAILURE


async def _check(
    client: ReleaseClient, tag: str, repositories: cabc.Sequence[str]
) -> list[bool]:
    try:
        return [
            await client.get_release(repository, tag) is not None
            for repository in repositories
        ]
    finally:
        await client.aclose()


@app.command(name="list")
def list_releases(
    *,
    repos: str | None = None,
    limit: int = 10,
    config: Path | None = None,
    org: typ.Annotated[str | None, Parameter(env_var="CREEL_GITHUB_ORG")] = None,
) -> int:
    """List recent releases for each repository.

    Args:
        repos: Comma-separated repository names.
        limit: Releases shown per repository.
        config: YAML configuration file.
        org: Organisation qualifying bare repository names.

    Returns:
        Exit code (0 for success, non-zero for failure).

    """
    settings = _load(config)
    if settings is None:
        return EXIT_USAGE
    if limit < 1:
        print(f"Error: --limit must be positive, got: {limit}", file=sys.stderr)
        return EXIT_USAGE
    repositories = _resolve_repos(repos, settings)
    if not repositories:
        print(_NO_REPOS_MESSAGE, file=sys.stderr)
        return EXIT_USAGE
    try:
        client = build_client(settings, org)
    except GitHubConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        listings = asyncio.run(_list(client, repositories, limit))
    except _FETCH_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Recent releases (limit: {limit}):")
    print()
    for repository, releases in zip(repositories, listings, strict=True):
        print(f"Repository: {repository}")
        if not releases:
            print("  No releases found")
        for release in releases:
            print(f"  - {release.tag}: {release.created_at.strftime('%Y-%m-%d')}")
        print()
    return EXIT_OK


async def _list(
    client: ReleaseClient, repositories: cabc.Sequence[str], limit: int
) -> list[list[ReleaseFact]]:
    try:
        return [
            await client.list_releases(repository, limit=limit)
            for repository in repositories
        ]
    finally:
        await client.aclose()


def main() -> int:
    """Entry point for the CLI.

    Configures femtologging from ``CREEL_LOG_LEVEL`` before dispatching.
    """
    raw_level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    level, invalid = configure_logging(raw_level)
    if invalid:
        log_warning(
            logger,
            "Invalid %s %r, falling back to %s",
            LOG_LEVEL_ENV_VAR,
            raw_level,
            level,
        )
    return app()


if __name__ == "__main__":
    sys.exit(main())
