"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

_CREEL_ENV_VARS = (
    "CREEL_CONCURRENCY",
    "CREEL_FAILURE_POLICY",
    "CREEL_TIMEOUT_S",
    "CREEL_GITHUB_ORG",
    "CREEL_GITHUB_API_URL",
    "CREEL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_creel_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``CREEL_*`` settings from the host shell out of the tests."""
    for name in _CREEL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
