"""Configuration file loading for release aggregation runs."""

from __future__ import annotations

from .errors import ConfigError
from .loader import load_config
from .models import (
    AggregationSettings,
    CreelConfig,
    FeatureToggles,
    GitHubSettings,
    OutputSettings,
    RepositorySelection,
)
from .validation import select_repositories, validate_config

__all__ = [
    "AggregationSettings",
    "ConfigError",
    "CreelConfig",
    "FeatureToggles",
    "GitHubSettings",
    "OutputSettings",
    "RepositorySelection",
    "load_config",
    "select_repositories",
    "validate_config",
]
