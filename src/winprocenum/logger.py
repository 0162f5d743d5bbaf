"""Loguru setup for the winprocenum CLI."""

import sys

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>"


def setup_logger(log_level: str = "WARNING") -> None:
    """Send log records at ``log_level`` and above to stderr, replacing loguru's default sink."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=log_level, colorize=True)
