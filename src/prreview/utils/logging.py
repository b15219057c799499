"""Console and CI logging for the review helper.

All records go to stderr so JSON printed on stdout stays pipeable.

    human    [WARNING] Model a failed: throttled
    verbose  [WARNING][14:02:11] Model a failed: throttled
    json     {"level": "WARNING", "ts": "...", "msg": "...", "model": "a", ...}

Records may carry a ``fields`` dict (``extra={"fields": {...}}``); only the
JSON formatter emits it. Model attempts are logged through
``log_model_attempt`` so every attempt has the same shape in CI logs.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "prreview"

_ANSI_RESET = "\033[0m"
_LEVEL_ANSI = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class LogMode(Enum):
    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class ConsoleFormatter(logging.Formatter):
    """``[LEVEL] message``, optionally colored and time-stamped."""

    def __init__(self, use_colors: bool = False, timestamps: bool = False) -> None:
        super().__init__()
        self.use_colors = use_colors
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{_LEVEL_ANSI.get(record.levelno, '')}{tag}{_ANSI_RESET}"
        if self.timestamps:
            tag += datetime.now().strftime("[%H:%M:%S]")

        line = f"{tag} {record.getMessage()}"
        if record.exc_info and self.timestamps:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with any attached ``fields`` merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the ``prreview`` hierarchy."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_model_attempt(
    logger: logging.Logger,
    model: str,
    position: int,
    error: str | None = None,
) -> None:
    """Log the outcome of one model invocation.

    Failures are warnings, successes info. JSON output carries ``model``,
    ``role`` (primary/fallback), ``outcome`` and, for failures, ``reason``.

    Args:
        logger: Logger to emit on
        model: Model identifier
        position: Index in the model chain (0 is the primary)
        error: Failure reason, None when the model answered
    """
    role = "primary" if position == 0 else "fallback"
    fields: dict[str, Any] = {
        "model": model,
        "role": role,
        "outcome": "success" if error is None else "failure",
    }
    if error is None:
        logger.info("Model %s succeeded (%s)", model, role, extra={"fields": fields})
    else:
        fields["reason"] = error
        logger.warning("Model %s failed: %s", model, error, extra={"fields": fields})


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Install a single stderr handler on the ``prreview`` logger.

    Args:
        mode: Output mode
        level: Minimum level
        stream: Override the output stream (tests pass a StringIO)
    """
    stream = stream or sys.stderr

    if mode is LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter(
            use_colors=bool(getattr(stream, "isatty", None) and stream.isatty()),
            timestamps=mode is LogMode.VERBOSE,
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)


def configure_from_cli(verbose: bool = False, quiet: bool = False, ci: bool = False) -> None:
    """Map the global CLI flags onto a logging mode and level.

    --ci wins over --verbose for the format; --quiet wins over --verbose for
    the level.
    """
    mode = LogMode.JSON if ci else LogMode.VERBOSE if verbose else LogMode.HUMAN
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    setup_logging(mode=mode, level=level)
