"""
Logging setup.

Library modules log through loguru's global ``logger`` and never add sinks
themselves; applications call configure_logging() once at startup.
"""
import sys
from loguru import logger

from .config import LOG_FORMAT, LOG_LEVEL

_LOGGER_CONFIGURED = False


def configure_logging(level: str = LOG_LEVEL, sink=sys.stderr, force: bool = False) -> None:
    """Replace loguru's default sink with one at the given level (only once)."""
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    logger.remove()
    logger.add(sink, level=level, format=LOG_FORMAT, backtrace=True, diagnose=False)
    _LOGGER_CONFIGURED = True
    logger.debug("Logger initialized at level {}", level)
