"""Unit tests for AggregationConfig."""

from __future__ import annotations

import pytest

from creel.releases import AggregationConfig, FetchFailurePolicy

_ENV_VARS = ("CREEL_CONCURRENCY", "CREEL_FAILURE_POLICY", "CREEL_TIMEOUT_S")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove aggregation variables inherited from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAggregationConfig:
    """Tests for AggregationConfig defaults and bounds."""

    def test_defaults(self) -> None:
        """Defaults are four workers, abort on failure, no timeout."""
        config = AggregationConfig()
        assert config.concurrency == 4
        assert config.failure_policy is FetchFailurePolicy.ABORT
        assert config.timeout_s is None

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            pytest.param({"concurrency": 0}, "concurrency", id="zero-concurrency"),
            pytest.param({"timeout_s": 0}, "timeout_s", id="zero-timeout"),
            pytest.param({"timeout_s": -1.5}, "timeout_s", id="negative-timeout"),
        ],
    )
    def test_rejects_out_of_range(
        self, kwargs: dict[str, float], message: str
    ) -> None:
        """Non-positive bounds are rejected at construction."""
        with pytest.raises(ValueError, match=message):
            AggregationConfig(**kwargs)  # type: ignore[arg-type]


class TestAggregationConfigFromEnv:
    """Tests for AggregationConfig.from_env."""

    @pytest.mark.parametrize(
        ("env_vars", "expected"),
        [
            pytest.param({}, AggregationConfig(), id="defaults"),
            pytest.param(
                {"CREEL_CONCURRENCY": "12"},
                AggregationConfig(concurrency=12),
                id="concurrency",
            ),
            pytest.param(
                {"CREEL_FAILURE_POLICY": " Exclude "},
                AggregationConfig(failure_policy=FetchFailurePolicy.EXCLUDE),
                id="policy",
            ),
            pytest.param(
                {"CREEL_TIMEOUT_S": "2.5", "CREEL_CONCURRENCY": " "},
                AggregationConfig(timeout_s=2.5),
                id="timeout-and-blank",
            ),
        ],
    )
    def test_from_env(
        self,
        clean_env: pytest.MonkeyPatch,
        env_vars: dict[str, str],
        expected: AggregationConfig,
    ) -> None:
        """Environment variables override defaults; blanks are ignored."""
        for name, value in env_vars.items():
            clean_env.setenv(name, value)

        assert AggregationConfig.from_env() == expected

    @pytest.mark.parametrize(
        ("name", "value", "message"),
        [
            ("CREEL_CONCURRENCY", "four", "must be an integer"),
            ("CREEL_CONCURRENCY", "0", "must be positive"),
            ("CREEL_FAILURE_POLICY", "retry", "must be one of abort, exclude"),
            ("CREEL_TIMEOUT_S", "soon", "must be a number"),
            ("CREEL_TIMEOUT_S", "-1", "must be positive"),
        ],
    )
    def test_from_env_rejects_invalid_values(
        self,
        clean_env: pytest.MonkeyPatch,
        name: str,
        value: str,
        message: str,
    ) -> None:
        """Invalid values name the offending variable."""
        clean_env.setenv(name, value)

        with pytest.raises(ValueError, match=name) as excinfo:
            AggregationConfig.from_env()

        assert message in str(excinfo.value)
