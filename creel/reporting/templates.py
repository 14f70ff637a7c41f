"""Render aggregated releases through user-supplied Jinja2 templates.

A custom template receives the context described in
:func:`creel.reporting.context.build_release_context`. Templates whose file
name ends in ``.html`` or ``.xml`` are autoescaped; anything else (for
example ``notes.md.j2``) is rendered verbatim.

Usage
-----
>>> from pathlib import Path
>>> from creel.reporting.templates import render_release_template
>>> text = render_release_template(release, Path("templates/notes.md.j2"))

"""

from __future__ import annotations

import typing as typ

import jinja2

from .context import build_release_context
from .errors import RenderError
from .formats import RenderOptions

if typ.TYPE_CHECKING:
    from pathlib import Path

    from creel.releases.models import AggregatedRelease


def _environment(directory: Path) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(directory)),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
        keep_trailing_newline=True,
    )


def render_release_template(
    release: AggregatedRelease,
    template_path: Path,
    options: RenderOptions | None = None,
) -> str:
    """Render ``release`` with the Jinja2 template at ``template_path``.

    Raises
    ------
    RenderError
        If the template does not exist, fails to compile or fails to
        render.

    """
    if not template_path.is_file():
        raise RenderError.template_missing(template_path)
    opts = options or RenderOptions()
    environment = _environment(template_path.parent)
    try:
        template = environment.get_template(template_path.name)
        return template.render(**build_release_context(release, opts))
    except jinja2.TemplateError as exc:
        raise RenderError.template_failed(template_path, str(exc)) from exc
