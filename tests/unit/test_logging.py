"""Unit tests for logging formatters and setup."""

import io
import json
import logging
import sys

from prreview.utils.logging import (
    ConsoleFormatter,
    JSONFormatter,
    LogMode,
    configure_from_cli,
    get_logger,
    log_model_attempt,
    setup_logging,
)


def _record(msg: str = "hello %s", args: tuple = ("world",), level: int = logging.INFO):
    return logging.LogRecord("prreview.test", level, __file__, 1, msg, args, None)


class TestFormatters:
    """Tests for console and JSON output."""

    def test_plain(self) -> None:
        assert ConsoleFormatter().format(_record()) == "[INFO] hello world"

    def test_colored(self) -> None:
        line = ConsoleFormatter(use_colors=True).format(_record(level=logging.ERROR))

        assert "\033[31m[ERROR]" in line
        assert line.endswith("hello world")

    def test_timestamps(self) -> None:
        line = ConsoleFormatter(timestamps=True).format(_record(level=logging.WARNING))

        assert line.startswith("[WARNING][")
        assert line.endswith("] hello world")

    def test_json_merges_fields(self) -> None:
        record = _record()
        record.fields = {"model": "a", "outcome": "failure"}

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "prreview.test"
        assert data["msg"] == "hello world"
        assert data["model"] == "a"
        assert data["outcome"] == "failure"
        assert "ts" in data

    def test_json_includes_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "prreview.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in data["error"]


class TestGetLogger:
    """Tests for logger naming."""

    def test_root(self) -> None:
        assert get_logger().name == "prreview"

    def test_module_name_kept(self) -> None:
        assert get_logger("prreview.llm.fallback").name == "prreview.llm.fallback"

    def test_foreign_name_nested(self) -> None:
        assert get_logger("scripts").name == "prreview.scripts"


class TestLogModelAttempt:
    """Tests for per-model attempt records."""

    def test_failure_json(self) -> None:
        stream = io.StringIO()
        setup_logging(mode=LogMode.JSON, level=logging.DEBUG, stream=stream)

        log_model_attempt(get_logger("prreview.test.attempt"), "model-b", 1, error="throttled")

        data = json.loads(stream.getvalue().strip())
        assert data["level"] == "WARNING"
        assert data["msg"] == "Model model-b failed: throttled"
        assert data["model"] == "model-b"
        assert data["role"] == "fallback"
        assert data["outcome"] == "failure"
        assert data["reason"] == "throttled"

    def test_success_human(self) -> None:
        stream = io.StringIO()
        setup_logging(mode=LogMode.HUMAN, level=logging.INFO, stream=stream)

        log_model_attempt(get_logger("prreview.test.attempt"), "model-a", 0)

        assert stream.getvalue() == "[INFO] Model model-a succeeded (primary)\n"

    def test_respects_level(self) -> None:
        stream = io.StringIO()
        setup_logging(mode=LogMode.HUMAN, level=logging.WARNING, stream=stream)

        log_model_attempt(get_logger("prreview.test.attempt"), "model-a", 0)

        assert stream.getvalue() == ""


class TestConfigureFromCli:
    """Tests for CLI flag handling."""

    def test_quiet_sets_warning(self) -> None:
        configure_from_cli(quiet=True)

        assert logging.getLogger("prreview").level == logging.WARNING

    def test_quiet_beats_verbose(self) -> None:
        configure_from_cli(verbose=True, quiet=True)

        assert logging.getLogger("prreview").level == logging.WARNING

    def test_verbose_sets_debug(self) -> None:
        configure_from_cli(verbose=True)

        logger = logging.getLogger("prreview")
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].formatter.timestamps is True

    def test_ci_uses_json(self) -> None:
        configure_from_cli(ci=True, verbose=True)

        assert isinstance(logging.getLogger("prreview").handlers[0].formatter, JSONFormatter)
