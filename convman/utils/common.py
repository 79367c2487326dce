# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   common.py

@Time    :   2021/4/20 9:41 上午

@Desc    :

"""

import logging
from typing import Optional, Text

LOG_FORMAT = "%(levelname)s:%(message)s"


def configure_logging(debug: bool = False, log_format: Optional[Text] = None) -> None:
    """Sets up the root logger, at `DEBUG` level when `debug` is set."""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(format=log_format or LOG_FORMAT, level=level)
    logging.getLogger().setLevel(level)

    # keep the http clients quiet unless something is wrong
    logging.getLogger("aiohttp").setLevel(max(level, logging.WARNING))
