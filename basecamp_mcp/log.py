"""Logging configuration using loguru.

Intercepts stdlib logging so that httpx, the MCP SDK, etc. all flow through
loguru with a unified format.  Console output goes to stderr: stdout carries
the MCP stdio transport and must stay clean.  MCP hosts often discard the
server's stderr, so an optional log file can be added.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_NOISY_LOGGERS = ("httpx", "httpcore", "mcp.server.lowlevel.server")


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk past logging's own frames so loguru reports the real call-site
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Configure loguru as the sole logging sink.

    Call this once at process startup, before the MCP server starts.
    ``log_file`` adds a rotating plain-text file sink next to stderr.
    """
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT, diagnose=False)
    if log_file:
        logger.add(
            log_file,
            level=level,
            format=_FORMAT,
            colorize=False,
            rotation="10 MB",
            retention=3,
            encoding="utf-8",
            diagnose=False,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging initialised (level={}, file={})", level, log_file or "-")
