"""
Logging setup.

Library modules only call logging.getLogger(__name__); handlers are
attached once by the host (or the CLI) through setup_logger().
"""

from __future__ import annotations
import logging
import logging.handlers
import sys
from pathlib import Path

from .config import TACTICA_LOG_LEVEL


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = "tactica",
    level: str | None = None,
    log_file: str | None = None,
    max_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        name: Logger name (the package root by default)
        level: Level name; falls back to TACTICA_LOG_LEVEL
        log_file: Optional path for a rotating file handler
        max_size_mb: Rotation size for the file handler
        backup_count: Rotated files kept
        console_output: Attach a stdout handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    # Already configured
    if logger.handlers:
        return logger

    log_level = getattr(logging, (level or TACTICA_LOG_LEVEL).upper(), logging.INFO)
    logger.setLevel(log_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
