"""Unit tests for the aggregation engine."""

# ruff: noqa: D102

from __future__ import annotations

import datetime as dt

import msgspec
import pytest

from creel.releases import (
    MissingRepositoryInputError,
    NoRelease,
    Released,
    RepositoryInputs,
    aggregate,
    summarize,
)
from tests.helpers.release_builders import released_inputs, unreleased_inputs

GENERATED_AT = dt.datetime(2024, 7, 2, tzinfo=dt.UTC)


def _three_repo_inputs() -> dict[str, RepositoryInputs]:
    return {
        "A": released_inputs("v2.0.0", ["x", "y", "x"]),
        "B": unreleased_inputs(),
        "C": released_inputs("v2.0.0", ["y", "z"]),
    }


class TestAggregate:
    """Tests for assembling the aggregated release."""

    def test_summary_counts_union_of_contributors(self) -> None:
        release = aggregate(
            "v2.0.0", ["A", "B", "C"], _three_repo_inputs(), generated_at=GENERATED_AT
        )
        summary = release.summary
        assert summary.total_repos == 3
        assert summary.updated_repos == 2
        assert summary.total_commits == 5
        assert summary.contributors == 3, "contributors is a union, not a sum"
        assert summary.contributor_names == ("x", "y", "z")

    def test_components_follow_request_order(self) -> None:
        inputs = _three_repo_inputs()
        for order in (["A", "B", "C"], ["C", "A", "B"], ["B", "C", "A"]):
            release = aggregate("v2.0.0", order, inputs, generated_at=GENERATED_AT)
            assert [component.repository for component in release.components] == order

    def test_status_variants(self) -> None:
        release = aggregate(
            "v2.0.0", ["A", "B", "C"], _three_repo_inputs(), generated_at=GENERATED_AT
        )
        statuses = [component.status for component in release.components]
        assert isinstance(statuses[0], Released)
        assert isinstance(statuses[1], NoRelease)
        assert statuses[1].latest_version == "v0.9.0"
        assert isinstance(statuses[2], Released)

    def test_is_idempotent(self) -> None:
        inputs = _three_repo_inputs()
        first = aggregate("v2.0.0", ["A", "B", "C"], inputs, generated_at=GENERATED_AT)
        second = aggregate("v2.0.0", ["A", "B", "C"], inputs, generated_at=GENERATED_AT)
        assert first == second
        assert msgspec.json.encode(first) == msgspec.json.encode(second)

    def test_thread_pool_preserves_order_and_result(self) -> None:
        inputs = {
            f"repo-{index}": released_inputs("v2.0.0", [f"dev-{index}"])
            for index in range(12)
        }
        repos = sorted(inputs, reverse=True)
        serial = aggregate("v2.0.0", repos, inputs, generated_at=GENERATED_AT)
        pooled = aggregate(
            "v2.0.0", repos, inputs, generated_at=GENERATED_AT, max_workers=4
        )
        assert pooled == serial

    def test_invalid_worker_count(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            aggregate("v2.0.0", ["A"], _three_repo_inputs(), max_workers=0)

    def test_missing_inputs_raise(self) -> None:
        with pytest.raises(MissingRepositoryInputError) as excinfo:
            aggregate("v2.0.0", ["A", "D"], _three_repo_inputs())
        assert excinfo.value.repository == "D"

    def test_empty_repository_list(self) -> None:
        release = aggregate("v2.0.0", [], {}, generated_at=GENERATED_AT)
        assert release.components == ()
        assert release.summary.total_repos == 0
        assert release.version == "v2.0.0"
        assert release.generated_at == GENERATED_AT

    def test_generated_at_defaults_to_now(self) -> None:
        before = dt.datetime.now(dt.UTC)
        release = aggregate("v2.0.0", [], {})
        assert release.generated_at >= before
        assert release.generated_at.tzinfo is not None

    def test_released_without_commits_counts_as_updated(self) -> None:
        inputs = {"A": released_inputs("v2.0.0", [])}
        release = aggregate("v2.0.0", ["A"], inputs, generated_at=GENERATED_AT)
        assert release.summary.updated_repos == 1
        assert release.summary.total_commits == 0


class TestSummarize:
    """Tests for cross-repository totals."""

    def test_no_release_only(self) -> None:
        release = aggregate(
            "v2.0.0",
            ["B"],
            {"B": unreleased_inputs()},
            generated_at=GENERATED_AT,
        )
        assert summarize(release.components) == release.summary
        assert release.summary.updated_repos == 0
        assert release.summary.contributors == 0
