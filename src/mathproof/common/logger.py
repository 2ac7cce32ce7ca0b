"""Package-wide logger for mathproof."""
import logging
import os
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "MATHPROOF_LOG_LEVEL"

logger: logging.Logger = logging.getLogger("mathproof")


def configure_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """
    Attach a stderr handler to the package logger and set its level.

    Calling it again only updates the level, no duplicate handlers are added.

    :param level: Logging level name or number, defaults to $MATHPROOF_LOG_LEVEL or WARNING

    :return: The configured package logger
    :rtype: logging.Logger
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        level = level.upper()

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # Records are handled here, not by the root logger
        logger.propagate = False

    logger.setLevel(level)
    return logger
