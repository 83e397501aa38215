"""Logging setup for docsmith.

Three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] logger: message
- CI/JSON mode: {"level":"...","ts":"...","logger":"...","msg":"...", ...extras}

Library modules log through ``logging.getLogger(__name__)``; every logger
under the ``docsmith`` namespace shares the handler installed here.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "docsmith"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


# ANSI escape codes per level
_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _supports_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ConsoleFormatter(logging.Formatter):
    """Formatter for terminal output.

    Human mode prints ``[LEVEL] message``. Verbose mode adds the wall-clock
    time and the short logger name so render steps can be traced per module.
    """

    def __init__(self, verbose: bool = False, use_colors: bool = True) -> None:
        super().__init__()
        self.verbose = verbose
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        level = f"[{record.levelname}]"
        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, _RESET)
            level = f"{color}{level}{_RESET}"

        message = record.getMessage()
        if self.verbose:
            timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            short_name = record.name.removeprefix(f"{ROOT_LOGGER}.")
            line = f"{level}[{timestamp}] {short_name}: {message}"
        else:
            line = f"{level} {message}"

        if record.exc_info and self.verbose:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable)."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if hasattr(record, "extra_data"):
            log_entry.update(record.extra_data)

        if record.exc_info:
            log_entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class DocsmithLogger(logging.Logger):
    """Logger with structured logging support."""

    def structured(self, level: int, msg: str, **kwargs: Any) -> None:
        """Log a message with additional structured data.

        Extra keyword arguments appear as top-level keys in JSON mode and are
        ignored by the console formatter.

        Args:
            level: Log level
            msg: Log message
            **kwargs: Additional data to include in JSON output
        """
        if not self.isEnabledFor(level):
            return
        self.log(level, msg, extra={"extra_data": kwargs} if kwargs else None)


logging.setLoggerClass(DocsmithLogger)


def get_logger(name: str = ROOT_LOGGER) -> DocsmithLogger:
    """Get a docsmith logger instance.

    Args:
        name: Logger name

    Returns:
        DocsmithLogger instance
    """
    return logging.getLogger(name)  # type: ignore


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure the docsmith logger hierarchy.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr, so rendered output on stdout stays clean)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    target = stream or sys.stderr

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter(
            verbose=mode == LogMode.VERBOSE,
            use_colors=_supports_color(target),
        )

    handler = logging.StreamHandler(target)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
) -> None:
    """Map the global CLI flags onto a logging mode and level.

    ``--ci`` wins over ``--verbose`` for the mode; ``--quiet`` wins over
    ``--verbose`` for the level.
    """
    mode = LogMode.JSON if ci else LogMode.VERBOSE if verbose else LogMode.HUMAN
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    setup_logging(mode=mode, level=level)
