"""Errors raised while loading configuration files."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded or is invalid."""

    def __init__(self, issues: cabc.Sequence[str]) -> None:
        """Capture validation issues whilst preserving the aggregated message."""
        self.issues = list(issues)
        super().__init__("\n".join(self.issues))
