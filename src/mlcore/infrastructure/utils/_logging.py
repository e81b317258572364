"""
Package logger setup.

All mlcore modules log through children of the ``mlcore`` logger. The level
is read once from the ``MLCORE_LOGLEVEL`` environment variable (default
``WARNING``), so allocation traces and shape-resolution decisions can be
switched on without code changes:

    MLCORE_LOGLEVEL=DEBUG python -m pytest tests
"""

import logging
import os

LOG_LEVEL_ENV_SETTER = "MLCORE_LOGLEVEL"
ROOT_LOGGER_NAME = "mlcore"


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level_name = os.environ.get(LOG_LEVEL_ENV_SETTER, "WARNING").upper()
    logger.setLevel(logging._nameToLevel.get(level_name, logging.WARNING))
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-10s%(name)s.%(funcName)s: - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)
    return logger


default_logger = setup_logger()


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger for module `name`."""
    if name.startswith(ROOT_LOGGER_NAME + ".") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return default_logger.getChild(name)
