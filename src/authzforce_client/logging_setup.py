"""Logger construction for authzforce-client.

The library never configures logging on import. Components that log take a
logging.Logger explicitly (PdpClient, cleanup, build) and fall back to a
silent logger when none is given. Applications that want output build one
with get_console_logger(), which is what the CLI does.

Accepted level names are ERROR, WARN, INFO and DEBUG (WARNING is accepted as
an alias of WARN).
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "get_console_logger",
    "null_logger",
    "parse_log_level",
]

import logging
import sys
from typing import TextIO

from authzforce_client.constants import APP_NAME, DEFAULT_LOG_LEVEL

_LEVELS: dict[str, int] = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Produces "[LEVEL] message", with WARNING shortened to WARN.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        level = "WARN" if record.levelno == logging.WARNING else record.levelname
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"[{level}] {message}"


def parse_log_level(name: str | None) -> int:
    """Map a level name to a logging level.

    Unknown or empty names fall back to INFO.

    Args:
        name: Level name, case-insensitive.

    Returns:
        int: logging module level constant.
    """
    if not name:
        return _LEVELS[DEFAULT_LOG_LEVEL]
    return _LEVELS.get(name.strip().upper(), _LEVELS[DEFAULT_LOG_LEVEL])


def get_console_logger(
    level: str | None = DEFAULT_LOG_LEVEL,
    stream: TextIO | None = None,
    name: str = APP_NAME,
) -> logging.Logger:
    """Create (or reconfigure) a logger writing to stderr.

    Calling again with the same name replaces the handler, so level changes
    never stack duplicate handlers.

    Args:
        level: ERROR, WARN, INFO or DEBUG.
        stream: Output stream (default: sys.stderr).
        name: Logger name.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(parse_log_level(level))
    logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ConsoleFormatter())
    logger.addHandler(handler)

    return logger


def null_logger() -> logging.Logger:
    """Get the logger that discards everything.

    Used as the default sink when callers inject no logger.
    """
    logger = logging.getLogger(f"{APP_NAME}.null")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger
