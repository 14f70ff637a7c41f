"""Dispatch an aggregated release to the renderer for an output format."""

from __future__ import annotations

import typing as typ

from .formats import OutputFormat, RenderOptions
from .html import render_release_html
from .markdown import render_release_markdown
from .serialization import render_release_json
from .templates import render_release_template

if typ.TYPE_CHECKING:
    from pathlib import Path

    from creel.releases.models import AggregatedRelease


def render_release(
    release: AggregatedRelease,
    fmt: OutputFormat | str = OutputFormat.MARKDOWN,
    options: RenderOptions | None = None,
    *,
    template_path: Path | None = None,
) -> str:
    """Render ``release`` in ``fmt``.

    Parameters
    ----------
    release
        The finished aggregate.
    fmt
        Output format or its name (``markdown``, ``md``, ``json``, ``html``).
    options
        Feature toggles and link settings.
    template_path
        Custom Jinja2 template replacing the built-in Markdown or HTML
        layout. JSON output ignores it.

    Raises
    ------
    RenderError
        If the format is unknown or the template fails.

    """
    output_format = fmt if isinstance(fmt, OutputFormat) else OutputFormat.parse(fmt)
    opts = options or RenderOptions()
    if output_format is OutputFormat.JSON:
        return render_release_json(release)
    if template_path is not None:
        return render_release_template(release, template_path, opts)
    if output_format is OutputFormat.HTML:
        return render_release_html(release, opts)
    return render_release_markdown(release, opts)
