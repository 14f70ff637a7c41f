"""Locate a target release and its predecessor in a release history.

Hosting APIs return releases in an order that is not guaranteed, so the
resolver always works on a copy sorted by ``(created_at, tag)``. Sorting on
the tag as a secondary key gives a total, reproducible order even when two
releases share a creation timestamp.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .errors import ReleaseNotFoundError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .models import ReleaseFact


@dc.dataclass(frozen=True, slots=True)
class ResolvedRelease:
    """The target release and the release immediately before it.

    Attributes
    ----------
    current
        Release whose tag matches the target.
    previous
        Latest release created strictly before ``current``; ``None`` for an
        initial release.

    """

    current: ReleaseFact
    previous: ReleaseFact | None = None

    @property
    def is_initial(self) -> bool:
        """Return True when the target is the repository's first release."""
        return self.previous is None


def _release_order(release: ReleaseFact) -> tuple[dt.datetime, str]:
    return (release.created_at, release.tag)


def sort_releases(history: cabc.Iterable[ReleaseFact]) -> list[ReleaseFact]:
    """Return releases in ascending ``(created_at, tag)`` order."""
    return sorted(history, key=_release_order)


def resolve(history: cabc.Iterable[ReleaseFact], target_tag: str) -> ResolvedRelease:
    """Find ``target_tag`` and its predecessor in ``history``.

    Parameters
    ----------
    history
        Releases of one repository, in any order. Not modified.
    target_tag
        Exact, case-sensitive tag to look for. No ``v`` prefix
        normalisation is applied.

    Returns
    -------
    ResolvedRelease
        The matching release and the release with the greatest
        ``(created_at, tag)`` among those created strictly earlier.

    Raises
    ------
    ReleaseNotFoundError
        If no release carries ``target_tag``.

    Examples
    --------
    >>> import datetime as dt
    >>> from creel.releases.models import ReleaseFact
    >>> t0 = dt.datetime(2024, 1, 1, tzinfo=dt.UTC)
    >>> history = [
    ...     ReleaseFact(tag="v1.1.0", created_at=t0 + dt.timedelta(days=1)),
    ...     ReleaseFact(tag="v1.0.0", created_at=t0),
    ... ]
    >>> resolve(history, "v1.1.0").previous.tag
    'v1.0.0'

    """
    ordered = sort_releases(history)

    current_index: int | None = None
    for index, release in enumerate(ordered):
        if release.tag == target_tag:
            current_index = index
    if current_index is None:
        raise ReleaseNotFoundError(target_tag)

    current = ordered[current_index]
    previous: ReleaseFact | None = None
    # Entries sharing current's timestamp sort next to it but are not "before" it.
    for candidate in reversed(ordered[:current_index]):
        if candidate.created_at < current.created_at:
            previous = candidate
            break
    return ResolvedRelease(current=current, previous=previous)


def latest_release(history: cabc.Iterable[ReleaseFact]) -> ReleaseFact | None:
    """Return the most recent release by ``(created_at, tag)``, if any."""
    return max(history, key=_release_order, default=None)
