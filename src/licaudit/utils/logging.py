"""Logging setup for licaudit.

Every handler writes to stderr; stdout carries only the report. The CLI
flags pick one of three line shapes:

    [WARNING] No license for example.com/x/a/sub: ...      default
    [DEBUG][14:02:11] Resolved example.com/x/a -> ...      --verbose
    {"level": "INFO", "ts": "...", "logger": "...", ...}   --ci
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

ROOT_LOGGER = "licaudit"

_RESET = "\033[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class ConsoleFormatter(logging.Formatter):
    """``[LEVEL] message``, optionally colored and with an ``[HH:MM:SS]`` stamp."""

    def __init__(self, use_colors: bool = False, timestamps: bool = False) -> None:
        super().__init__(datefmt="%H:%M:%S")
        self.use_colors = use_colors
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS.get(record.levelno, _RESET)}{tag}{_RESET}"
        if self.timestamps:
            tag += f"[{self.formatTime(record, self.datefmt)}]"
        line = f"{tag} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JSONLinesFormatter(logging.Formatter):
    """One JSON object per record; ``extra_data`` keys are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "extra_data", {}))
        return json.dumps(entry, default=str)


class AuditLogger(logging.Logger):
    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log ``msg`` with ``fields`` attached as ``record.extra_data``.

        Console output shows only ``msg``; JSON lines carry the fields too.
        """
        self.log(level, msg, extra={"extra_data": fields}, stacklevel=2)


logging.setLoggerClass(AuditLogger)


def get_logger(name: str = ROOT_LOGGER) -> AuditLogger:
    """Get a licaudit logger instance."""
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    level: int = logging.INFO,
    json_lines: bool = False,
    timestamps: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single handler on the ``licaudit`` logger.

    Calling this again replaces the previous handler. Colors are used only
    when ``stream`` is a terminal.

    Returns:
        The installed handler
    """
    stream = stream or sys.stderr

    if json_lines:
        formatter: logging.Formatter = JSONLinesFormatter()
    else:
        is_tty = getattr(stream, "isatty", None)
        formatter = ConsoleFormatter(
            use_colors=bool(is_tty and is_tty()),
            timestamps=timestamps,
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def configure_from_cli(verbose: bool = False, quiet: bool = False, ci: bool = False) -> None:
    """Map the --verbose, --quiet and --ci flags onto setup_logging.

    --quiet wins over --verbose for the level; --ci wins over --verbose for
    the line shape.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(level=level, json_lines=ci, timestamps=verbose and not ci)
