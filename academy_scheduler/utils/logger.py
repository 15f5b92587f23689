# File: academy_scheduler/utils/logger.py
"""
Centralized logging configuration for the academy scheduler.

Environment:
    LOG_LEVEL: console level name (default INFO)
    LOG_DIR: directory for the daily log file (default "logs"); empty disables file logging
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'


def _level_from_env() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _file_handler() -> Optional[logging.Handler]:
    """Daily file handler, or None when LOG_DIR is set to an empty string."""
    log_dir = os.getenv("LOG_DIR", "logs")
    if not log_dir:
        return None

    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    log_file = path / f"academy_scheduler_{datetime.now().strftime('%Y%m%d')}.log"

    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logger(name: str = "academy_scheduler", level: Optional[int] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (module __name__ or class name)
        level: Console level; defaults to LOG_LEVEL from the environment

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    level = _level_from_env() if level is None else level
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console_handler)

    file_handler = _file_handler()
    if file_handler is not None:
        logger.addHandler(file_handler)

    return logger


class LoggerMixin:
    """Gives controllers and workflows a logger named after their class."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = setup_logger(self.__class__.__name__)
        return self._logger
