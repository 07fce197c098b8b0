"""Logging configuration for codeinput using loguru."""

import os
import sys
from loguru import logger
from typing import Optional

from codeinput.utils import get_project_root

# Store the configured log file path to ensure consistency
_log_file_path: Optional[str] = None

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} - {message}"


def setup_logger(
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    console_output: bool = False,
) -> None:
    """
    Configure loguru logger with file and console output.

    Args:
        log_file: Path to the log file (if None, uses the previously configured path;
            no file sink is added when no path was ever configured)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation: Log rotation size
        retention: How long to keep old logs
        compression: Compression format for old logs
        console_output: Whether to output to stderr
    """
    global _log_file_path

    if log_file is None:
        log_file = _log_file_path
    else:
        # Relative paths are resolved against the project root
        if not os.path.isabs(log_file):
            log_file = os.path.join(get_project_root(), log_file)
        _log_file_path = log_file

    # Remove default handler
    logger.remove()
    logger.configure(extra={"name": "codeinput"})

    if console_output:
        logger.add(
            sys.stderr,
            level=log_level,
            format=_CONSOLE_FORMAT,
            colorize=True,
        )

    if log_file:
        logger.add(
            log_file,
            level=log_level,
            format=_FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression=compression,
            encoding="utf-8",
        )


def get_logger(name: Optional[str] = None):
    """
    Get a configured logger instance.

    Args:
        name: Optional name for the logger

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# Default configuration comes from the environment so that embedding hosts
# stay silent unless they opt in.
setup_logger(
    log_file=os.environ.get("CODEINPUT_LOG_FILE") or None,
    log_level=os.environ.get("CODEINPUT_LOG_LEVEL", "INFO"),
    console_output=os.environ.get("CODEINPUT_LOG_CONSOLE", "") == "1",
)
