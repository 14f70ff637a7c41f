"""Unit tests for the femtologging helpers in ``creel.logging``."""

from __future__ import annotations

import pytest

from creel.logging import (
    configure_logging,
    format_log_message,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


class TestNormalizeLogLevel:
    """Tests for normalize_log_level."""

    @pytest.mark.parametrize(
        ("raw", "expected", "invalid"),
        [
            ("warning", "WARNING", False),
            ("  debug ", "DEBUG", False),
            ("TRACE", "TRACE", False),
            (None, "INFO", True),
            ("", "INFO", True),
            ("   ", "INFO", True),
            ("verbose", "INFO", True),
        ],
    )
    def test_normalize_log_level(
        self, raw: str | None, expected: str, *, invalid: bool
    ) -> None:
        """Known levels are upper-cased; anything else falls back to INFO."""
        assert normalize_log_level(raw) == (expected, invalid)


class TestLogHelpers:
    """Tests for the percent-formatting ``log_*`` wrappers."""

    def test_format_log_message_uses_percent_formatting(self) -> None:
        """Percent formatting produces the expected message."""
        assert format_log_message("hello %s (%d)", "world", 3) == "hello world (3)"

    def test_format_log_message_without_args_keeps_template(self) -> None:
        """Templates without arguments are passed through untouched."""
        assert format_log_message("100% done") == "100% done"

    def test_log_info_formats_and_passes_level(self) -> None:
        """log_info formats messages and emits INFO level."""
        logger = _FakeLogger()

        log_info(logger, "aggregating %d repositories", 3)

        assert logger.calls == [("INFO", "aggregating 3 repositories", None, False)]

    def test_log_debug_emits_debug(self) -> None:
        """log_debug emits at DEBUG."""
        logger = _FakeLogger()

        log_debug(logger, "page %d", 2)

        assert logger.calls == [("DEBUG", "page 2", None, False)]

    def test_log_warning_forwards_exc_info(self) -> None:
        """log_warning forwards exc_info to the logger."""
        logger = _FakeLogger()
        exc = ValueError("boom")

        log_warning(logger, "warning: %s", "oops", exc_info=exc)

        assert logger.calls == [("WARNING", "warning: oops", exc, False)]

    def test_log_error_defaults_exc_info_to_none(self) -> None:
        """log_error omits exc_info unless supplied."""
        logger = _FakeLogger()

        log_error(logger, "error: %s", "oops")

        assert logger.calls == [("ERROR", "error: oops", None, False)]

    def test_log_exception_passes_exc_info(self) -> None:
        """log_exception attaches the exception without formatting."""
        logger = _FakeLogger()
        exc = ValueError("boom")

        log_exception(logger, "failed at 100%", exc)

        assert logger.calls == [("ERROR", "failed at 100%", exc, False)]


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture
    def captured(self, monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
        """Replace femtologging's basicConfig with a recorder."""
        calls: dict[str, object] = {}

        def fake_basic_config(**kwargs: object) -> None:
            calls.update(kwargs)

        monkeypatch.setattr("creel.logging.basicConfig", fake_basic_config)
        return calls

    @pytest.mark.parametrize(
        ("raw", "expected", "invalid"),
        [("DEBUG", "DEBUG", False), ("nope", "INFO", True)],
    )
    def test_configure_logging(
        self,
        captured: dict[str, object],
        raw: str,
        expected: str,
        *,
        invalid: bool,
    ) -> None:
        """configure_logging applies the normalised level."""
        assert configure_logging(raw) == (expected, invalid)
        assert captured == {"level": expected, "force": False}

    def test_configure_logging_can_force(self, captured: dict[str, object]) -> None:
        """``force`` is passed through to femtologging."""
        configure_logging("error", force=True)
        assert captured == {"level": "ERROR", "force": True}
