"""Logging setup."""

import sys

from loguru import logger

from .config import LOG_FILE, LOG_LEVEL

# drop loguru's default stderr sink
logger.remove()

logger.add(
    sys.stdout,
    level=LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)

if LOG_FILE:
    logger.add(
        LOG_FILE,
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

logger.configure(extra={"name": "noodle_vote"})


def get_logger(name: str = None):
    """Return the shared logger, optionally bound to a module name."""
    if name:
        return logger.bind(name=name)
    return logger
