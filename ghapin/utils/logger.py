"""Logging setup for ghapin."""

import logging
import sys

LOGGER_NAME = "ghapin"
LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure the ghapin logger

    Records below WARNING go to stdout, WARNING and above to stderr.

    Args:
        debug: Log DEBUG records as well

    Returns:
        The configured "ghapin" logger
    """
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)

    return logger
