"""Conventional-commit classification of commit messages.

Commit headers follow ``<type>[(scope)][!]: <description>``. The type token
is looked up in a single static table mapping it to a :class:`CommitType`
and the display label renderers use for grouping. Anything the table does
not know, including messages with no header at all, is classified as
``Other`` and keeps its raw token.

Classification never fails: malformed input degrades to ``Other("")``.

Example:
>>> classify("feat(api)!: drop v1 endpoints").breaking
True
>>> classify("chore: bump deps").raw_type
'chore'

"""

from __future__ import annotations

import re
import typing as typ

from .models import CommitClassification, CommitType

if typ.TYPE_CHECKING:
    import collections.abc as cabc

OTHER_LABEL = "📝 Other Changes"

# Table order is the display order used when grouping commits by type.
COMMIT_TYPE_TABLE: typ.Final[dict[str, tuple[CommitType, str]]] = {
    "feat": (CommitType.FEATURE, "✨ Features"),
    "fix": (CommitType.FIX, "🐛 Bug Fixes"),
    "docs": (CommitType.DOCS, "📚 Documentation"),
    "perf": (CommitType.PERFORMANCE, "⚡ Performance"),
    "refactor": (CommitType.REFACTOR, "♻️ Refactoring"),
    "test": (CommitType.TEST, "✅ Tests"),
    "build": (CommitType.BUILD, "📦 Build System"),
    "ci": (CommitType.CI, "👷 CI/CD"),
}

_HEADER_PATTERN = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9_-]*)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<bang>!)?"
    r"(?::[ \t]+(?P<description>.*)|:)$"
)
_BREAKING_FOOTER = "BREAKING CHANGE:"
_PR_REFERENCE_PATTERN = re.compile(r"\(#(\d+)\)")
_ISSUE_REFERENCE_PATTERN = re.compile(r"(?<![\w&])#(\d+)\b")


def _first_line(message: str) -> str:
    lines = message.splitlines()
    return lines[0].strip() if lines else ""


def _has_breaking_footer(message: str) -> bool:
    """Check lines after the header for a ``BREAKING CHANGE:`` footer."""
    return any(
        line.startswith(_BREAKING_FOOTER) for line in message.splitlines()[1:]
    )


def classify(message: str | None) -> CommitClassification:
    """Classify a commit message.

    Parameters
    ----------
    message
        Raw commit message; ``None`` is treated as empty.

    Returns
    -------
    CommitClassification
        Category, raw type token, scope, breaking flag and description.

    Examples
    --------
    >>> result = classify("feat!: add x")
    >>> (result.commit_type, result.breaking)
    (<CommitType.FEATURE: 'feat'>, True)
    >>> classify("random text").raw_type
    ''

    """
    if not message:
        return CommitClassification(commit_type=CommitType.OTHER)

    header = _first_line(message)
    footer_breaking = _has_breaking_footer(message)
    match = _HEADER_PATTERN.match(header)
    if match is None:
        return CommitClassification(
            commit_type=CommitType.OTHER,
            breaking=footer_breaking,
            description=header,
        )

    raw_type = match.group("type").lower()
    entry = COMMIT_TYPE_TABLE.get(raw_type)
    commit_type = entry[0] if entry is not None else CommitType.OTHER
    scope = (match.group("scope") or "").strip()
    return CommitClassification(
        commit_type=commit_type,
        raw_type=raw_type,
        scope=scope or None,
        breaking=match.group("bang") is not None or footer_breaking,
        description=(match.group("description") or "").strip(),
    )


def label_for(
    commit_type: CommitType,
    overrides: cabc.Mapping[str, str] | None = None,
) -> str:
    """Return the display label for ``commit_type``.

    Parameters
    ----------
    commit_type
        Category to label.
    overrides
        Optional token-to-label mapping (e.g. from configuration) taking
        precedence over the built-in labels.

    """
    if overrides and commit_type.value in overrides:
        return overrides[commit_type.value]
    entry = COMMIT_TYPE_TABLE.get(commit_type.value)
    return entry[1] if entry is not None else OTHER_LABEL


def display_order() -> tuple[CommitType, ...]:
    """Return categories in the order renderers list them."""
    return (*(entry[0] for entry in COMMIT_TYPE_TABLE.values()), CommitType.OTHER)


def extract_pr_number(message: str | None) -> int | None:
    """Return the pull request number from a ``(#123)`` reference, if any."""
    if not message:
        return None
    match = _PR_REFERENCE_PATTERN.search(message)
    return int(match.group(1)) if match is not None else None


def extract_issue_numbers(message: str | None) -> tuple[int, ...]:
    """Return sorted, unique ``#N`` issue references in ``message``.

    The pull request reference found by :func:`extract_pr_number` is not
    reported as an issue.
    """
    if not message:
        return ()
    pr_number = extract_pr_number(message)
    numbers = {int(found) for found in _ISSUE_REFERENCE_PATTERN.findall(message)}
    if pr_number is not None:
        numbers.discard(pr_number)
    return tuple(sorted(numbers))


def clean_summary(message: str | None) -> str:
    """Return the subject line without its conventional-commit prefix.

    The first letter is upper-cased; the PR reference is kept so renderers
    that do not link pull requests still show it.
    """
    description = classify(message).description
    if not description:
        return ""
    return description[0].upper() + description[1:]
