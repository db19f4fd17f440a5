"""
Logging setup shared by the analysis modules.

Each module calls setup_logger(__name__) once at import. The level comes
from BRIDGE_ANALYSIS_LOG_LEVEL unless given explicitly.
"""

import logging
import os
import sys

DEFAULT_LEVEL_ENV = 'BRIDGE_ANALYSIS_LOG_LEVEL'
LOG_FORMAT = '%(asctime)s - %(name)s - %(funcName)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def default_level():
    """Level named in the environment, INFO when unset or unknown"""
    level = logging.getLevelName(os.environ.get(DEFAULT_LEVEL_ENV, 'INFO').upper())
    return level if isinstance(level, int) else logging.INFO


def _handler(handler, level):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(name, level=None, log_file=None):
    """
    Logger writing to stdout (and optionally a file), configured once.

    Args:
        name: Logger name, normally the module's __name__
        level: Logging level, defaults to default_level()
        log_file: Optional extra file to log to

    Returns:
        The configured logger. A logger that already has handlers is
        returned unchanged.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = default_level() if level is None else level
    logger.setLevel(level)
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file), level))

    # Our handlers already print; don't repeat through the root logger
    logger.propagate = False
    return logger
