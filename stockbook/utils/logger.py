"""Logging configuration for the application.

Console output goes to stderr so that command output on stdout (tables,
``summary --json``) stays machine-readable.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import get_config


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Setup a logger with a stderr console handler and an optional rotating file.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Optional log level (overrides config)

    Returns:
        Configured logger instance
    """
    config = get_config()
    settings = config.logging

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or settings.level).upper()))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(settings.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, settings.console_level.upper()))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # No log files in production; stderr is collected by the host.
    if log_file and not config.is_production:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def _concern_logger(concern: str, level: Optional[str] = None) -> logging.Logger:
    log_file = getattr(get_config().logging.files, concern)
    return setup_logger(f"stockbook.{concern}", log_file, level)


def get_inventory_logger() -> logging.Logger:
    """Get logger for inventory mutations."""
    return _concern_logger("inventory")


def get_storage_logger() -> logging.Logger:
    """Get logger for persistent store access."""
    return _concern_logger("storage")


def get_error_logger() -> logging.Logger:
    """Get logger for error tracking."""
    return _concern_logger("error", "ERROR")


def get_api_logger() -> logging.Logger:
    """Get logger for the HTTP API."""
    return _concern_logger("api")
