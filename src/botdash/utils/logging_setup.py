"""Loguru sink configuration shared by the launcher and the Streamlit app."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure logging for the dashboard.

    Args:
        level: Minimum level for both sinks
        log_file: Optional path to write logs to file (rotated daily)

    Returns:
        None
    """
    # Remove default handler
    logger.remove()

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation="1 day",
            retention="30 days",
        )
        logger.info(f"Logging to file: {log_file}")
