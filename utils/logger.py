"""
Logging configuration and utilities for the serial probe.
Provides centralized logging setup for all modules.
"""

import logging
import sys

from config.settings import Config

_configured = set()


def setup_logger(name: str, level: int = None) -> logging.Logger:
    """
    Setup and configure logger for a module.

    Console output goes to stderr; stdout is reserved for the probe transcript.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (default: Config.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = logging.getLevelName(Config.LOG_LEVEL)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    _configured.add(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    if Config.LOG_FILE is not None:
        try:
            Config.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(Config.LOG_FILE, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(Config.LOG_FILE_FORMAT, datefmt=Config.LOG_DATE_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Failed to setup file logging: {e}")

    return logger


def set_level(level: int) -> None:
    """Change the level of every logger configured by setup_logger."""
    for name in _configured:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
