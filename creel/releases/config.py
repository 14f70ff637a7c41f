"""Configuration for the release aggregation service.

Usage
-----
Create a configuration with defaults:

>>> config = AggregationConfig()
>>> config.concurrency
4

Or load from environment variables:

>>> import os
>>> os.environ["CREEL_CONCURRENCY"] = "8"
>>> AggregationConfig.from_env().concurrency
8

"""

from __future__ import annotations

import dataclasses as dc
import enum
import os

_DEFAULT_CONCURRENCY = 4


class FetchFailurePolicy(enum.StrEnum):
    """What to do when fetching facts for a repository fails."""

    ABORT = "abort"
    EXCLUDE = "exclude"


@dc.dataclass(frozen=True, slots=True)
class AggregationConfig:
    """Settings for :class:`~creel.releases.service.ReleaseAggregationService`.

    Attributes
    ----------
    concurrency
        Maximum number of repositories fetched at once. Size this to the
        hosting API's rate limits. Default is 4.
    failure_policy
        ``abort`` raises when any repository fails to fetch; ``exclude``
        drops failed repositories from the aggregate. Default is ``abort``.
    timeout_s
        Optional overall time budget in seconds. When exceeded the run is
        abandoned and no partial result is returned.

    """

    concurrency: int = _DEFAULT_CONCURRENCY
    failure_policy: FetchFailurePolicy = FetchFailurePolicy.ABORT
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        """Validate bounds."""
        if self.concurrency < 1:
            msg = f"concurrency must be positive, got: {self.concurrency}"
            raise ValueError(msg)
        if self.timeout_s is not None and self.timeout_s <= 0:
            msg = f"timeout_s must be positive, got: {self.timeout_s}"
            raise ValueError(msg)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_timeout(env_var: str) -> float | None:
        raw = os.environ.get(env_var, "").strip()
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_policy(env_var: str) -> FetchFailurePolicy:
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return FetchFailurePolicy.ABORT
        try:
            return FetchFailurePolicy(raw)
        except ValueError as exc:
            allowed = ", ".join(policy.value for policy in FetchFailurePolicy)
            msg = f"{env_var} must be one of {allowed}, got: {raw!r}"
            raise ValueError(msg) from exc

    @classmethod
    def from_env(cls) -> AggregationConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``CREEL_CONCURRENCY``: Positive integer bound on parallel fetches.
        - ``CREEL_FAILURE_POLICY``: ``abort`` or ``exclude``.
        - ``CREEL_TIMEOUT_S``: Optional positive overall timeout in seconds.

        Raises
        ------
        ValueError
            If any variable holds an invalid value.

        """
        return cls(
            concurrency=cls._parse_positive_int(
                "CREEL_CONCURRENCY", _DEFAULT_CONCURRENCY
            ),
            failure_policy=cls._parse_policy("CREEL_FAILURE_POLICY"),
            timeout_s=cls._parse_timeout("CREEL_TIMEOUT_S"),
        )
