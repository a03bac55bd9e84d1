import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so each test sees default logging."""
    yield
    logger = logging.getLogger("reversi_agent")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
