"""Logging configuration for the readiness gate."""

from __future__ import annotations

import logging
import sys

from loguru import logger

# Clients used by the checks log every request at INFO; one line per attempt is noise.
QUIET_LOGGERS = ("httpx", "httpcore")

_LOGGING_CONFIGURED = False


class InterceptHandler(logging.Handler):
    """Re-emit stdlib records from the check libraries through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(source=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO", *, json_logs: bool = False) -> None:
    """Send all output to stderr, as text or one JSON object per line."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = level.upper()
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.getLevelName(level), force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.remove()
    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message} | {extra}",
            diagnose=False,
        )

    _LOGGING_CONFIGURED = True


__all__ = ["configure_logging", "logger", "InterceptHandler", "QUIET_LOGGERS"]
