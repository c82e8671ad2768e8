"""
Logging setup shared by every component.
"""

import logging
import sys

LOGGER_NAME = "nft_pinner"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(level="INFO"):
    """Configure the process logger and return it for injection into components."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
