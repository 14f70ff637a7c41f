"""HTML renderer for aggregated releases.

Renders the bundled ``release.html`` Jinja2 template with autoescaping, so
commit messages and release notes containing markup are shown literally.
"""

from __future__ import annotations

import functools
import typing as typ

import jinja2

from .context import build_release_context
from .errors import RenderError
from .formats import RenderOptions

if typ.TYPE_CHECKING:
    from creel.releases.models import AggregatedRelease

_TEMPLATE_NAME = "release.html"


@functools.cache
def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.PackageLoader("creel.reporting", "templates"),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_release_html(
    release: AggregatedRelease,
    options: RenderOptions | None = None,
) -> str:
    """Render an aggregated release as a standalone HTML page.

    Raises
    ------
    RenderError
        If the bundled template fails to render.

    """
    opts = options or RenderOptions()
    context = build_release_context(release, opts)
    try:
        template = _environment().get_template(_TEMPLATE_NAME)
        return template.render(**context)
    except jinja2.TemplateError as exc:
        raise RenderError.template_failed(_TEMPLATE_NAME, str(exc)) from exc
