"""Errors specific to the reporting module."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ReportingError(Exception):
    """Base class for reporting module errors."""


class RenderError(ReportingError):
    """Raised when a release cannot be rendered in the requested form."""

    @classmethod
    def unknown_format(cls, value: str) -> RenderError:
        """Return an error for an unrecognised output format name."""
        return cls(f"Unknown output format: {value}")

    @classmethod
    def template_missing(cls, path: Path) -> RenderError:
        """Return an error for a template file that does not exist."""
        return cls(f"Template not found: {path}")

    @classmethod
    def template_failed(cls, path: Path | str, reason: str) -> RenderError:
        """Return an error for a template that failed to compile or render."""
        return cls(f"Template {path} failed to render: {reason}")
