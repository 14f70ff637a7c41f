"""Emit structured observability events for release aggregation runs.

Usage
-----
>>> event_logger = AggregationEventLogger()
>>> event_logger.log_run_started(version="v1.2.0", repository_count=3)

"""

from __future__ import annotations

import enum
import typing as typ

from creel.github.observability import categorize_error
from creel.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import AggregatedRelease

logger = get_logger(__name__)


class AggregationEventType(enum.StrEnum):
    """Structured log event types for aggregation runs."""

    RUN_STARTED = "aggregation.run.started"
    RUN_COMPLETED = "aggregation.run.completed"
    RUN_FAILED = "aggregation.run.failed"
    REPOSITORY_NO_RELEASE = "aggregation.repository.no_release"
    REPOSITORY_FETCH_FAILED = "aggregation.repository.fetch_failed"
    REPOSITORY_EXCLUDED = "aggregation.repository.excluded"


class AggregationEventLogger:
    """Emit structured aggregation events via femtologging."""

    def log_run_started(self, *, version: str, repository_count: int) -> None:
        """Log the start of an aggregation run."""
        log_info(
            logger,
            "[%s] version=%s repository_count=%d",
            AggregationEventType.RUN_STARTED,
            version,
            repository_count,
        )

    def log_run_completed(
        self,
        *,
        release: AggregatedRelease,
        duration: dt.timedelta,
    ) -> None:
        """Log a completed run with the summary totals.

        Parameters
        ----------
        release
            The finished aggregate.
        duration
            Wall-clock time spent fetching and aggregating.

        """
        summary = release.summary
        log_info(
            logger,
            "[%s] version=%s total_repos=%d updated_repos=%d total_commits=%d "
            "contributors=%d duration_seconds=%.3f",
            AggregationEventType.RUN_COMPLETED,
            release.version,
            summary.total_repos,
            summary.updated_repos,
            summary.total_commits,
            summary.contributors,
            duration.total_seconds(),
        )

    def log_run_failed(self, *, version: str, error: BaseException) -> None:
        """Log an aborted run."""
        log_error(
            logger,
            "[%s] version=%s error_type=%s error_message=%s",
            AggregationEventType.RUN_FAILED,
            version,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_no_release(
        self,
        *,
        repository: str,
        version: str,
        latest_version: str | None,
    ) -> None:
        """Log a repository that has not published the target release."""
        log_info(
            logger,
            "[%s] repository=%s version=%s latest_version=%s",
            AggregationEventType.REPOSITORY_NO_RELEASE,
            repository,
            version,
            latest_version,
        )

    def log_fetch_failed(self, *, repository: str, error: BaseException) -> None:
        """Log a per-repository fetch failure with its error category."""
        log_error(
            logger,
            "[%s] repository=%s error_category=%s error_type=%s error_message=%s",
            AggregationEventType.REPOSITORY_FETCH_FAILED,
            repository,
            categorize_error(error),
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_excluded(self, *, repository: str, version: str) -> None:
        """Log a repository dropped from the aggregate after a fetch failure."""
        log_warning(
            logger,
            "[%s] repository=%s version=%s",
            AggregationEventType.REPOSITORY_EXCLUDED,
            repository,
            version,
        )
