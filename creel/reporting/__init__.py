"""Renderers and sinks for aggregated releases.

Public API
----------
FilesystemReleaseSink
    Filesystem adapter for the ``ReleaseSink`` protocol.
OutputFormat
    Supported output formats (Markdown, JSON, HTML).
ReleaseSink
    Protocol (port) for persisting rendered releases.
RenderOptions
    Feature toggles and link settings shared by the renderers.
render_release
    Dispatch a release to the renderer for a format.
"""

from __future__ import annotations

from .errors import RenderError, ReportingError
from .filesystem_sink import FilesystemReleaseSink
from .formats import OutputFormat, RenderOptions
from .html import render_release_html
from .markdown import render_release_markdown
from .render import render_release
from .serialization import decode_release_json, render_release_json
from .sink import ReleaseSink
from .templates import render_release_template

__all__ = [
    "FilesystemReleaseSink",
    "OutputFormat",
    "ReleaseSink",
    "RenderError",
    "RenderOptions",
    "ReportingError",
    "decode_release_json",
    "render_release",
    "render_release_html",
    "render_release_json",
    "render_release_markdown",
    "render_release_template",
]
