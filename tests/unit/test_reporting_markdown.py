"""Unit tests for Markdown release rendering."""

from __future__ import annotations

import pytest

from creel.releases import aggregate
from creel.reporting import RenderOptions
from creel.reporting.markdown import render_release_markdown
from tests.helpers.release_builders import (
    GENERATED_AT,
    sample_release,
    sha_for,
    unreleased_inputs,
)

_OPTIONS = RenderOptions(org="acme")
_API_URL = "https://github.com/acme/api"


def _section(markdown: str, repository: str) -> str:
    """Return the text between ``## repository`` and the next rule."""
    start = markdown.index(f"## {repository}\n")
    end = markdown.index("\n---\n", start)
    return markdown[start:end]


class TestRenderReleaseMarkdown:
    """Tests for ``render_release_markdown``."""

    @pytest.fixture
    def markdown(self) -> str:
        """Render the sample release with an organisation set."""
        return render_release_markdown(sample_release(), _OPTIONS)

    def test_title_and_summary(self, markdown: str) -> None:
        """The document opens with the title, date and summary bullets."""
        assert markdown.startswith("# Release v1.1.0\n\n📅 **Date:** 2024-07-02\n")
        assert "## 📊 Summary" in markdown
        assert "- **Total Repositories:** 3" in markdown
        assert "- **Updated Repositories:** 2" in markdown
        assert "- **Total Commits:** 5" in markdown
        assert "- **Contributors:** 4" in markdown

    def test_components_follow_request_order(self, markdown: str) -> None:
        """Component sections appear in the order repositories were given."""
        positions = [
            markdown.index(f"## {name}\n") for name in ("acme/api", "web", "worker")
        ]
        assert positions == sorted(positions)

    def test_released_header(self, markdown: str) -> None:
        """Released components show version, previous tag, date and count."""
        section = _section(markdown, "acme/api")
        assert "**Version:** `v1.1.0`" in section
        assert "**Previous:** `v1.0.0`" in section
        assert "**Release Date:** 2024-07-01" in section
        assert "**Commits:** 4" in section
        assert "**Features:** 2 | **Fixes:** 1 | **Breaking Changes:** 1" in section

    def test_initial_release_has_no_previous(self, markdown: str) -> None:
        """A first release is labelled as such."""
        assert "**Previous:** *Initial Release*" in _section(markdown, "worker")

    def test_commits_grouped_in_display_order(self, markdown: str) -> None:
        """Groups follow the fixed display order with Other last."""
        section = _section(markdown, "acme/api")
        headings = [
            line for line in section.splitlines() if line.startswith("#### ")
        ]
        assert headings == [
            "#### ✨ Features",
            "#### 🐛 Bug Fixes",
            "#### 📝 Other Changes",
        ]

    def test_commit_line_links_sha_and_pr(self, markdown: str) -> None:
        """Scoped commits link their hash and pull request."""
        sha = sha_for("feat(auth): add token refresh (#42)", "alice")
        expected = (
            f"- **auth:** Add token refresh ([`{sha[:7]}`]({_API_URL}/commit/{sha}))"
            f" ([#42]({_API_URL}/pull/42))"
        )
        assert expected in markdown

    def test_breaking_and_issue_references(self, markdown: str) -> None:
        """Breaking commits are flagged and issue references linked."""
        assert "- **BREAKING** Drop legacy endpoint" in markdown
        assert f"closes [#7]({_API_URL}/issues/7)" in markdown

    def test_release_notes_and_contributors(self, markdown: str) -> None:
        """Notes and sorted contributors close the component section."""
        section = _section(markdown, "acme/api")
        assert "### 📝 Release Notes\n\nHighlights: <b>faster</b> auth" in section
        assert "### 👥 Contributors\n- @alice\n- @bob\n- @carol" in section

    def test_no_release_component(self, markdown: str) -> None:
        """Components without the release show the latest version instead."""
        section = _section(markdown, "web")
        assert "*No changes in this release*" in section
        assert "Latest version: `v1.0.0` (2024-07-01)" in section
        assert "### 🎯 Changes" not in section

    def test_bare_names_use_org_for_links(self, markdown: str) -> None:
        """Bare repository names are qualified with the organisation."""
        sha = sha_for("docs: write <readme>", "dave")
        assert f"https://github.com/acme/worker/commit/{sha}" in markdown


class TestRenderOptions:
    """Tests for feature toggles."""

    def test_flat_list_when_uncategorised(self) -> None:
        """Disabling categorisation lists commits without type headings."""
        markdown = render_release_markdown(
            sample_release(), RenderOptions(org="acme", categorize_commits=False)
        )
        assert "### 🎯 Changes" in markdown
        assert "#### " not in markdown

    def test_pr_and_issue_links_can_be_disabled(self) -> None:
        """Without PR linking the ``(#N)`` suffix stays in the summary."""
        markdown = render_release_markdown(
            sample_release(),
            RenderOptions(org="acme", include_prs=False, include_issues=False),
        )
        assert "Add token refresh (#42) (" in markdown
        assert "/pull/42" not in markdown
        assert "closes [#7]" not in markdown

    def test_stats_can_be_hidden(self) -> None:
        """Per-component stats are omitted when disabled."""
        markdown = render_release_markdown(
            sample_release(), RenderOptions(org="acme", include_stats=False)
        )
        assert "**Features:**" not in markdown

    def test_custom_group_labels(self) -> None:
        """Configured labels replace the built-in headings."""
        markdown = render_release_markdown(
            sample_release(),
            RenderOptions(org="acme", commit_type_labels={"feat": "New Stuff"}),
        )
        assert "#### New Stuff" in markdown
        assert "#### 🐛 Bug Fixes" in markdown

    def test_unqualified_names_render_without_links(self) -> None:
        """Without an organisation bare names get plain hashes."""
        markdown = render_release_markdown(sample_release())
        sha = sha_for("docs: write <readme>", "dave")
        assert f"(`{sha[:7]}`)" in markdown
        assert "acme/worker" not in markdown


def test_release_with_no_components_renders_summary_only() -> None:
    """An empty repository list still yields a valid document."""
    release = aggregate("v1.0.0", [], {}, generated_at=GENERATED_AT)

    markdown = render_release_markdown(release)

    assert "- **Total Repositories:** 0" in markdown
    assert "## " not in markdown.replace("## 📊 Summary", "")


def test_repository_without_any_release_omits_latest_line() -> None:
    """A repository with no releases at all shows only the placeholder."""
    release = aggregate(
        "v1.0.0", ["new"], {"new": unreleased_inputs(None)}, generated_at=GENERATED_AT
    )

    markdown = render_release_markdown(release)

    assert "*No changes in this release*" in markdown
    assert "Latest version" not in markdown
