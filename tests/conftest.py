import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_linbench_logger():
    yield
    logger = logging.getLogger("linbench")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
