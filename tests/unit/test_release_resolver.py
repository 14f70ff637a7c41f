"""Unit tests for release resolution."""

# ruff: noqa: D102

from __future__ import annotations

import random

import pytest

from creel.releases import ReleaseNotFoundError, latest_release, resolve
from creel.releases.resolver import sort_releases
from tests.helpers.release_builders import release


class TestResolve:
    """Tests for locating the target and previous release."""

    def test_previous_is_immediately_earlier_release(self) -> None:
        history = [release("v1.0.0", 10), release("v1.1.0", 20)]
        resolved = resolve(history, "v1.1.0")
        assert resolved.current.tag == "v1.1.0"
        assert resolved.previous is not None
        assert resolved.previous.tag == "v1.0.0"
        assert resolved.is_initial is False

    def test_oldest_release_is_initial(self) -> None:
        history = [release("v1.0.0", 10), release("v1.1.0", 20)]
        resolved = resolve(history, "v1.0.0")
        assert resolved.previous is None
        assert resolved.is_initial is True

    def test_unsorted_history_is_sorted_first(self) -> None:
        history = [
            release("v2.0.0", 30),
            release("v1.0.0", 10),
            release("v1.5.0", 20),
        ]
        resolved = resolve(history, "v2.0.0")
        assert resolved.previous is not None
        assert resolved.previous.tag == "v1.5.0"

    def test_input_is_not_mutated(self) -> None:
        history = [release("v2.0.0", 30), release("v1.0.0", 10)]
        snapshot = list(history)
        resolve(history, "v2.0.0")
        assert history == snapshot

    def test_missing_tag_raises(self) -> None:
        with pytest.raises(ReleaseNotFoundError) as excinfo:
            resolve([release("v1.0.0", 10)], "v9.9.9")
        assert excinfo.value.tag == "v9.9.9"

    def test_empty_history_raises(self) -> None:
        with pytest.raises(ReleaseNotFoundError):
            resolve([], "v1.0.0")

    def test_tag_match_is_exact(self) -> None:
        history = [release("v1.0.0", 10)]
        with pytest.raises(ReleaseNotFoundError):
            resolve(history, "1.0.0")
        with pytest.raises(ReleaseNotFoundError):
            resolve(history, "V1.0.0")

    def test_same_timestamp_release_is_not_previous(self) -> None:
        history = [
            release("v0.9.0", 5),
            release("v1.0.0-alt", 10),
            release("v1.0.0", 10),
        ]
        resolved = resolve(history, "v1.0.0")
        assert resolved.previous is not None
        assert resolved.previous.tag == "v0.9.0", (
            "a release sharing the target's timestamp is not strictly earlier"
        )

    def test_previous_tie_breaks_on_tag(self) -> None:
        history = [release("v1.0.1", 10), release("v1.0.0", 10), release("v2.0.0", 20)]
        resolved = resolve(history, "v2.0.0")
        assert resolved.previous is not None
        assert resolved.previous.tag == "v1.0.1"

    def test_result_is_independent_of_input_order(self) -> None:
        history = [release(f"v1.{index}.0", index * 10) for index in range(8)]
        history.append(release("v1.3.0-rc", 30))
        expected = resolve(history, "v1.5.0")
        rng = random.Random(1234)
        for _ in range(20):
            shuffled = list(history)
            rng.shuffle(shuffled)
            assert resolve(shuffled, "v1.5.0") == expected


class TestOrdering:
    """Tests for the deterministic release order helpers."""

    def test_sort_uses_tag_as_secondary_key(self) -> None:
        history = [release("b", 10), release("a", 10), release("c", 5)]
        assert [item.tag for item in sort_releases(history)] == ["c", "a", "b"]

    def test_latest_release(self) -> None:
        history = [release("v1.0.0", 10), release("v1.2.0", 30), release("v1.1.0", 20)]
        latest = latest_release(history)
        assert latest is not None
        assert latest.tag == "v1.2.0"

    def test_latest_release_of_empty_history(self) -> None:
        assert latest_release([]) is None
