# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   config.py

@Time    :   2020/11/10 9:04 上午

@Desc    :   运行配置, 从yaml或json文件加载

"""

import logging
from pathlib import Path
from typing import Any, Dict, Text, Union

from convman.shared.dialogue_config import (
    DEFAULT_DB_HOST,
    DEFAULT_DB_NAME,
    DEFAULT_FB_API_VERSION,
    DEFAULT_MESSAGING_API,
    DEFAULT_NLU_BACKEND,
    DEFAULT_REPOSITORY,
    DEFAULT_SERVER_PORT,
)
from convman.shared.exceptions import InvalidConfigException
import convman.shared.utils.io

logger = logging.getLogger(__name__)


class Config():
    """
    Sanic config
    """
    # Application config
    DEBUG = False
    # facebook waits at most 20 seconds for the webhook answer
    RESPONSE_TIMEOUT = 20


# key -> (expected type, default)
CONFIG_KEYS = {
    "debug": (bool, False),
    "listening_port": (int, DEFAULT_SERVER_PORT),
    "fb_verify_token": (str, ""),
    "fb_api_version": (str, DEFAULT_FB_API_VERSION),
    "fb_page_access_token": (str, ""),
    "nlu_backend": (str, DEFAULT_NLU_BACKEND),
    "wit_bearer_token": (str, ""),
    "repository": (str, DEFAULT_REPOSITORY),
    "db_host": (str, DEFAULT_DB_HOST),
    "db_name": (str, DEFAULT_DB_NAME),
    "db_user": (str, ""),
    "db_pass": (str, ""),
    "messaging_api": (str, DEFAULT_MESSAGING_API),
}


class BotConfig:
    """
    The runtime configuration of the bot.
    """

    def __init__(self, **kwargs: Any) -> None:
        for key, (expected_type, default) in CONFIG_KEYS.items():
            value = kwargs.pop(key, default)
            # bools are ints, a port of `true` is not valid
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                raise InvalidConfigException(
                    f"Invalid value '{value}' for '{key}', expected a "
                    f"{expected_type.__name__}."
                )
            setattr(self, key, value)

        if kwargs:
            logger.warning(
                f"Ignoring unknown configuration keys: {', '.join(sorted(kwargs))}."
            )

    def __repr__(self) -> Text:
        return (
            f"<BotConfig(nlu_backend: {self.nlu_backend}, "
            f"repository: {self.repository}, port: {self.listening_port})>"
        )

    @classmethod
    def from_dict(cls, data: Dict[Text, Any]) -> "BotConfig":
        return cls(**data)


def load_config(path: Union[Text, Path]) -> BotConfig:
    """Loads the configuration located at the given path.

    Raises:
        FileNotFoundException: if there is no file at `path`.
        YamlSyntaxException: if the file is neither valid yaml nor json.
        InvalidConfigException: if a value has the wrong type.
    """
    content = convman.shared.utils.io.read_config_file(path)
    return BotConfig.from_dict(content)
