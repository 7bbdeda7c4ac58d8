"""
log.py - Logging Setup

Configures loguru sinks for the CLI and GUI entry points.
Core modules only ever call ``logger``; they never add sinks themselves.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def setup_logging(
    level: str = "WARNING",
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging using loguru

    Args:
        level: Console log level
        verbose: Force DEBUG on the console
        log_file: Optional file that receives DEBUG and above (rotated daily)
    """
    log_level = "DEBUG" if verbose else level

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    if log_file is None:
        return

    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="1 day",
            retention="7 days",
            encoding="utf-8",
        )
        logger.debug(f"Logging initialized. Level: {log_level}. Log file: {log_path}")
    except OSError as e:
        logger.error(f"Could not configure file logging to {log_path}: {e}")
        logger.warning("File logging disabled.")
