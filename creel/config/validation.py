"""Validation rules for configuration documents."""

from __future__ import annotations

import fnmatch
import typing as typ

from creel.releases.classification import COMMIT_TYPE_TABLE
from creel.releases.config import FetchFailurePolicy
from creel.releases.models import CommitType
from creel.reporting.errors import RenderError
from creel.reporting.formats import OutputFormat

from .errors import ConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import CreelConfig

_KNOWN_COMMIT_TOKENS = frozenset((*COMMIT_TYPE_TABLE, CommitType.OTHER.value))


def _validate_repositories(config: CreelConfig, issues: list[str]) -> None:
    for index, name in enumerate(config.repos.include):
        candidate = name.strip()
        if not candidate:
            issues.append(f"repos.include[{index}] must be non-empty")
        elif candidate.count("/") > 1:
            issues.append(
                f"repos.include[{index}] must be 'name' or 'owner/name', got {name!r}"
            )


def _validate_output(config: CreelConfig, issues: list[str]) -> None:
    try:
        OutputFormat.parse(config.output.format)
    except RenderError as exc:
        issues.append(f"output.format: {exc}")
    if not config.output.path.strip():
        issues.append("output.path must be non-empty")


def _validate_aggregation(config: CreelConfig, issues: list[str]) -> None:
    settings = config.aggregation
    if settings.concurrency < 1:
        issues.append(
            f"aggregation.concurrency must be positive, got: {settings.concurrency}"
        )
    if settings.timeout_s is not None and settings.timeout_s <= 0:
        issues.append(
            f"aggregation.timeout_s must be positive, got: {settings.timeout_s}"
        )
    allowed = {policy.value for policy in FetchFailurePolicy}
    if settings.failure_policy.lower() not in allowed:
        issues.append(
            "aggregation.failure_policy must be one of "
            f"{', '.join(sorted(allowed))}, got: {settings.failure_policy!r}"
        )


def _validate_commit_types(config: CreelConfig, issues: list[str]) -> None:
    issues.extend(
        f"commit_types: unknown commit type {token!r}"
        for token in config.commit_types
        if token not in _KNOWN_COMMIT_TOKENS
    )


def validate_config(config: CreelConfig) -> CreelConfig:
    """Validate a configuration instance, returning it when all checks pass.

    Raises
    ------
    ConfigError
        Listing every problem found.

    """
    issues: list[str] = []
    _validate_repositories(config, issues)
    _validate_output(config, issues)
    _validate_aggregation(config, issues)
    _validate_commit_types(config, issues)
    if issues:
        raise ConfigError(issues)
    return config


def select_repositories(
    include: cabc.Iterable[str],
    exclude: cabc.Iterable[str] = (),
) -> list[str]:
    """Return ``include`` without duplicates or names matching ``exclude``.

    Order of first appearance is kept. Exclusions are case-sensitive
    shell-style globs.

    Examples
    --------
    >>> select_repositories(["api", "web", "sandbox-1", "api"], ["sandbox*"])
    ['api', 'web']

    """
    patterns = [pattern.strip() for pattern in exclude if pattern.strip()]
    selected: list[str] = []
    seen: set[str] = set()
    for raw in include:
        name = raw.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        if any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns):
            continue
        selected.append(name)
    return selected
