"""Release aggregation across multiple repositories.

The core (classification, resolution, component processing and aggregation)
is pure and synchronous. :class:`ReleaseAggregationService` drives it from a
:class:`ReleaseSource` with bounded asynchronous fan-out.

Public API
----------
aggregate
    Pure function assembling an :class:`AggregatedRelease` from gathered
    per-repository facts.
classify
    Parse a conventional-commit message into a classification.
process_component
    Build one repository's :class:`ComponentRelease`.
resolve
    Locate the target release and its predecessor in a release history.
ReleaseAggregationService
    Asynchronous driver fetching facts and applying the failure policy.
"""

from __future__ import annotations

from .aggregation import aggregate, summarize
from .classification import classify, display_order, label_for
from .config import AggregationConfig, FetchFailurePolicy
from .errors import (
    AggregationCancelledError,
    AggregationError,
    MissingRepositoryInputError,
    ReleaseNotFoundError,
    RepositoryFetchError,
)
from .models import (
    AggregatedRelease,
    CommitClassification,
    CommitFact,
    CommitType,
    ComponentRelease,
    ComponentStatus,
    EnrichedCommit,
    NoRelease,
    ReleaseFact,
    Released,
    ReleaseStats,
    ReleaseSummary,
    RepositoryInputs,
)
from .observability import AggregationEventLogger, AggregationEventType
from .processor import compute_stats, enrich_commit, process_component
from .resolver import ResolvedRelease, latest_release, resolve
from .service import ReleaseAggregationService
from .source import ReleaseSource

__all__ = [
    "AggregatedRelease",
    "AggregationCancelledError",
    "AggregationConfig",
    "AggregationError",
    "AggregationEventLogger",
    "AggregationEventType",
    "CommitClassification",
    "CommitFact",
    "CommitType",
    "ComponentRelease",
    "ComponentStatus",
    "EnrichedCommit",
    "FetchFailurePolicy",
    "MissingRepositoryInputError",
    "NoRelease",
    "ReleaseAggregationService",
    "ReleaseFact",
    "ReleaseNotFoundError",
    "ReleaseSource",
    "ReleaseStats",
    "ReleaseSummary",
    "Released",
    "RepositoryFetchError",
    "RepositoryInputs",
    "ResolvedRelease",
    "aggregate",
    "classify",
    "compute_stats",
    "display_order",
    "enrich_commit",
    "label_for",
    "latest_release",
    "process_component",
    "resolve",
    "summarize",
]
