"""Loguru sinks for command-line entry points.

Library modules log through the standard ``logging`` module; entry points call
``configure_logging`` to route those records into loguru sinks.
"""

import inspect
import logging
import sys
from pathlib import Path

from loguru import logger

from case_network.config_loader import LoggingConfig


class _LoguruHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the original caller, not the logging module
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Install stderr and optional rotating file sinks."""
    config = config or LoggingConfig()

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=config.level,
    )
    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
            level="DEBUG",
            rotation=config.rotation,
            retention=config.retention,
        )

    logging.basicConfig(handlers=[_LoguruHandler()], level=0, force=True)
