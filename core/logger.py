"""
Centralized logging for Trip Planner

Provides consistent logging across all modules with configurable
output to console and optional file logging.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from config import settings

# Module-level cache for loggers to prevent duplicate handlers
_loggers = {}


def setup_logger(
    name: str,
    log_file: Optional[Path] = None,
    level: Optional[int] = None
) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (typically module name)
        log_file: Optional path to log file
        level: Logging level (default: settings.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    # Return cached logger if exists
    if name in _loggers:
        return _loggers[name]

    if level is None:
        level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent propagation to root logger to avoid duplicate messages
    logger.propagate = False

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler (stderr for visibility in Streamlit)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    _loggers[name] = logger
    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        module_name: Short module name (e.g., 'sheet_store', 'synchronizer')

    Returns:
        Logger instance with 'trip_planner.' prefix
    """
    return setup_logger(f"trip_planner.{module_name}")


def configure_package_loggers(packages=("core", "integrations", "services", "ui")) -> None:
    """
    Attach handlers to the top-level package loggers.

    Modules log through logging.getLogger(__name__), so their records reach
    these handlers without each module calling setup_logger.
    """
    log_file = settings.LOGS_DIR / "trip_planner.log" if settings.LOG_TO_FILE else None
    for package in packages:
        setup_logger(package, log_file=log_file)
