"""Repository slug utilities.

Repository slugs are GitHub identifiers in ``owner/name`` format. They are not
filesystem paths, even though they use ``/`` as a separator, so they should be
parsed using these helpers rather than ``pathlib``.

Release configurations usually list bare repository names alongside a single
organisation; :func:`qualify_repository` turns either form into an
``(owner, name)`` pair.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Parameters
    ----------
    owner:
        GitHub repository owner (organisation or user).
    name:
        GitHub repository name.

    Returns
    -------
    str
        Slug in ``owner/name`` format.

    Examples
    --------
    >>> repo_slug("acme", "widget")
    'acme/widget'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug is not in ``owner/name`` format.

    Examples
    --------
    >>> parse_repo_slug("acme/widget")
    ('acme', 'widget')

    """
    if slug.count("/") != 1:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    owner, name = slug.split("/")
    if not owner or not name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name


def qualify_repository(repository: str, org: str | None) -> tuple[str, str]:
    """Resolve a bare name or ``owner/name`` slug into ``(owner, name)``.

    Parameters
    ----------
    repository:
        Either a bare repository name (``widget``) or a full slug
        (``acme/widget``).
    org:
        Organisation used to qualify bare names.

    Raises
    ------
    ValueError
        If a bare name is given without an organisation, or the slug is
        malformed.

    Examples
    --------
    >>> qualify_repository("widget", "acme")
    ('acme', 'widget')
    >>> qualify_repository("octo/reef", "acme")
    ('octo', 'reef')

    """
    candidate = repository.strip()
    if "/" in candidate:
        return parse_repo_slug(candidate)
    if not candidate:
        msg = "Repository name must be non-empty"
        raise ValueError(msg)
    if not org:
        msg = f"Repository {candidate!r} has no owner and no organisation is set"
        raise ValueError(msg)
    return org, candidate
