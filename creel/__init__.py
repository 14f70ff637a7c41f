"""Creel aggregates release notes across many repositories.

The aggregation core lives in :mod:`creel.releases`; GitHub access, rendering,
configuration and the command-line interface sit around it.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
