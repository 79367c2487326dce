import logging

import pytest

from convman.utils.common import configure_logging


@pytest.fixture(autouse=True)
def restore_levels():
    root = logging.getLogger()
    aiohttp_logger = logging.getLogger("aiohttp")
    levels = root.level, aiohttp_logger.level
    yield
    root.setLevel(levels[0])
    aiohttp_logger.setLevel(levels[1])


@pytest.mark.parametrize("debug, level", [(True, logging.DEBUG), (False, logging.INFO)])
def test_configure_logging(debug, level):
    configure_logging(debug)

    assert logging.getLogger().level == level
    assert logging.getLogger("aiohttp").level == logging.WARNING
