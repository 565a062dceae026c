"""Logging configuration with console and optional rotating file handlers"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'


def level_from_env(default: int = logging.INFO) -> int:
    """Console level from LOG_LEVEL (e.g. "DEBUG"); unknown names fall back to default"""
    name = os.getenv("LOG_LEVEL", "").upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_logging(
    log_file: Optional[str] = None,
    console_level: Optional[int] = None,
    file_level: int = logging.DEBUG,
    logger_name: str = "bm25hybrid"
) -> logging.Logger:
    """
    Configure logging for the package with up to two destinations:
    - Console: Brief logs (INFO by default, LOG_LEVEL overrides)
    - File: Detailed logs (DEBUG by default) with rotation, only if log_file is set

    Handlers are attached to the package logger, not the root logger, so an
    embedding application keeps control of its own logging.

    Args:
        log_file: Path to log file (None = console only)
        console_level: Console logging level (None = from LOG_LEVEL, else INFO)
        file_level: File logging level (DEBUG = verbose)
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    if console_level is None:
        console_level = level_from_env()

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter in handlers

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler - brief output
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # maxBytes=10MB, backupCount=10 (keep 10 old files)
        file_handler = RotatingFileHandler(
            log_path,
            mode='a',
            maxBytes=10*1024*1024,  # 10MB
            backupCount=10,
            encoding='utf-8'
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    logger.propagate = False

    logger.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={log_file or 'disabled'}"
        + (f" ({logging.getLevelName(file_level)})" if log_file else "")
    )
    return logger
