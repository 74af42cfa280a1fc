"""
Logging setup shared by the service modules.
"""
import logging
import sys

from fakegen.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Get a logger with a single stdout handler attached.

    Args:
        name: Logger name (usually __name__)
        level: Level name; defaults to settings.LOG_LEVEL
    """
    logger = logging.getLogger(name)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def configure_root(level: str | None = None) -> None:
    """
    Set one level for the whole fakegen logger tree.

    Module loggers created earlier by setup_logger() keep their own handler
    and do not propagate, so their level is updated in place as well.
    """
    root = setup_logger("fakegen", level)
    for name, existing in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("fakegen.") and isinstance(existing, logging.Logger):
            existing.setLevel(root.level)
