"""
Per-module loggers. Handlers and format are set once in the package
``__init__``; this only applies ``LOG_LEVEL``.
"""

import logging
import os


def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
