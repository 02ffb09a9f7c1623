"""
utils/logger_setup.py

loguru configuration for console runs and experiments.

The core modules only ever call `logger.<level>(...)`; sinks are decided
here by whoever owns the process (main.py, experiments).
"""

from datetime import datetime, timezone
import os
import sys
from typing import Optional

from loguru import logger


def setup_logger(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    enable_colors: bool = True,
) -> Optional[str]:
    """
    Set up console logging and, optionally, a file sink.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files; no file sink when None
        rotation: Log rotation policy (e.g., "10 MB", "1 day")
        retention: Log retention policy (e.g., "7 days")
        enable_colors: Whether to enable colored console output

    Returns:
        Path to the log file, or None when logging to console only
    """
    # Remove any existing handlers to avoid duplicates
    logger.remove()

    colorize = enable_colors and sys.stderr.isatty()

    if colorize:
        console_format = (
            "<green>{time:HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<blue>{function}</blue> | "
            "<level>{message}</level>"
        )
    else:
        console_format = "{time:HH:mm:ss.SSS} | {level: <8} | {name}:{function} | {message}"

    logger.add(
        sys.stderr,
        level=level,
        format=console_format,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )

    if log_dir is None:
        return None

    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"maze_ga_{timestamp}.log")

    # File handler (no colors in file)
    logger.add(
        log_file,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.debug("Logging to console and {} at level {}", log_file, level)
    return log_file
