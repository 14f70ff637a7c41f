"""Unit tests for building one repository's component release."""

# ruff: noqa: D102

from __future__ import annotations

from creel.releases import (
    CommitType,
    NoRelease,
    Released,
    compute_stats,
    enrich_commit,
    process_component,
)
from tests.helpers.release_builders import commit, release


class TestProcessComponent:
    """Tests for the Released / NoRelease decision."""

    def test_missing_target_yields_latest_known_release(self) -> None:
        history = [release("v1.0.0", 10), release("v1.1.0", 20)]
        component = process_component("api", "v2.0.0", history, [])
        assert component.repository == "api"
        assert isinstance(component.status, NoRelease)
        assert component.status.latest_version == "v1.1.0"
        assert component.status.latest_date == history[1].created_at
        assert component.released is False

    def test_empty_history_yields_empty_no_release(self) -> None:
        component = process_component("api", "v1.0.0", [], [])
        assert component.status == NoRelease()

    def test_released_component_carries_release_facts(self) -> None:
        history = [
            release("v1.0.0", 10),
            release("v1.1.0", 20, body="Highlights"),
        ]
        commits = [
            commit("feat: add search", "alice", offset=11),
            commit("fix: crash (#12)", "bob", offset=12),
        ]
        component = process_component("api", "v1.1.0", history, commits)
        status = component.status
        assert isinstance(status, Released)
        assert status.current == "v1.1.0"
        assert status.previous == "v1.0.0"
        assert status.release_date == history[1].created_at
        assert status.notes == "Highlights"
        assert [item.sha for item in status.commits] == [item.sha for item in commits]
        assert status.stats.commit_count == 2
        assert status.stats.contributors == ("alice", "bob")

    def test_initial_release_has_no_previous(self) -> None:
        component = process_component("api", "v1.0.0", [release("v1.0.0", 10)], [])
        status = component.status
        assert isinstance(status, Released)
        assert status.is_initial is True
        assert status.commits == ()
        assert status.stats.commit_count == 0

    def test_commit_order_is_preserved(self) -> None:
        commits = [commit(f"fix: step {index}", offset=-index) for index in range(5)]
        component = process_component(
            "api", "v1.0.0", [release("v1.0.0", 10)], commits
        )
        status = component.status
        assert isinstance(status, Released)
        assert [item.message for item in status.commits] == [
            item.message for item in commits
        ]


class TestEnrichCommit:
    """Tests for deriving commit metadata."""

    def test_pr_and_issues_parsed_from_message(self) -> None:
        enriched = enrich_commit(commit("fix(db): retry (#40)\n\nFixes #3"))
        assert enriched.commit_type == CommitType.FIX
        assert enriched.scope == "db"
        assert enriched.pr_number == 40
        assert enriched.issue_numbers == (3,)
        assert enriched.summary == "Retry (#40)"
        assert len(enriched.short_sha) == 7

    def test_source_references_take_precedence(self) -> None:
        enriched = enrich_commit(
            commit("fix: retry (#40) #3", pr_number=99, issue_numbers=(8,))
        )
        assert enriched.pr_number == 99
        assert enriched.issue_numbers == (8,)


class TestComputeStats:
    """Tests for per-component statistics."""

    def test_counts_types_contributors_and_breaking(self) -> None:
        commits = [
            enrich_commit(commit("feat!: new api", "x")),
            enrich_commit(commit("feat: more", "y")),
            enrich_commit(commit("fix: bug", "x")),
            enrich_commit(commit("chore: deps", "z")),
            enrich_commit(commit("style: lint", "z")),
        ]
        stats = compute_stats(commits)
        assert stats.commit_count == 5
        assert stats.contributors == ("x", "y", "z")
        assert stats.features == 2
        assert stats.fixes == 1
        assert stats.count_for(CommitType.OTHER) == 2
        assert stats.breaking_changes == 1
        assert stats.type_counts == {
            "feat": 2,
            "fix": 1,
            "other:chore": 1,
            "other:style": 1,
        }

    def test_empty_commits(self) -> None:
        stats = compute_stats([])
        assert stats.commit_count == 0
        assert stats.contributors == ()
        assert stats.type_counts == {}

    def test_untyped_messages_share_the_bare_other_key(self) -> None:
        commits = [
            enrich_commit(commit("Merge branch main", "x")),
            enrich_commit(commit("chore: deps", "x")),
            enrich_commit(commit("tidy up", "y")),
        ]
        stats = compute_stats(commits)
        assert stats.type_counts == {"other": 2, "other:chore": 1}
        assert stats.count_for(CommitType.OTHER) == 3
