"""
Logging Setup
Console and file sinks for loguru
"""

import sys
from typing import Optional
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

ERROR_LEVEL = logger.level("ERROR").no


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Progress to stdout, errors (with tracebacks) to stderr, everything to file

    Args:
        level: Console log level
        log_file: Rotating log file path (None/empty disables it)
    """
    # Raises ValueError for unknown levels while the old sinks are still attached
    logger.level(level)

    logger.remove()

    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=level,
        filter=lambda record: record["level"].no < ERROR_LEVEL
    )
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="ERROR",
        backtrace=True,
        diagnose=False
    )

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG",
            diagnose=False
        )
