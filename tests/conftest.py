"""Shared pytest fixtures."""
import logging

import pytest

from mathproof.common.logger import logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers attached by configure_logging, they hold the captured stderr of one test."""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
