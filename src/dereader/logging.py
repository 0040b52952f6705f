"""
Loggers for dereader.

Every module asks get_logger(__name__) for its logger. Loggers print to
stdout with a shared format; their level comes from the "dereader" logger
when that has been set (the CLI does this), otherwise from the
DEREADER_LOG_LEVEL environment variable, otherwise WARNING.
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.WARNING

ROOT_LOGGER_NAME = "dereader"

LOG_LEVEL_ENV_VAR = "DEREADER_LOG_LEVEL"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

FORMATTER = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a dereader module, attaching the stdout handler once.

    Args:
        name: Logger name, normally the module's __name__

    Returns:
        The logger
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    package_level = logging.getLogger(ROOT_LOGGER_NAME).level
    logger.setLevel(package_level if package_level != logging.NOTSET else _get_log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(FORMATTER)
    logger.addHandler(handler)
    return logger


def _get_log_level() -> int:
    """Level named by DEREADER_LOG_LEVEL, or the default when unset or unknown."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    return LOG_LEVELS.get(name, DEFAULT_LOG_LEVEL)


def set_log_level(level: int) -> None:
    """
    Set the level of the "dereader" logger and of every logger below it.

    Args:
        level: A logging level such as logging.DEBUG
    """
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
