# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   wit.py

@Time    :   2021/4/16 4:48 下午

@Desc    :   wit.ai 的解析器与接口

"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Text

import aiohttp

from convman.shared.dialogue_config import DEFAULT_WIT_API_VERSION, WIT_API_URL
from convman.shared.exceptions import ConnectionException, InvalidOrMissingParam
from convman.shared.nlu.interpreter import Intent, NaturalLanguageParser, NluRepository
from convman.shared.nlu.parsed_data import DataTypeMap, EntityType, freeze_data_type_map
from convman.shared.utils.registry import get_param
from convman.utils.endpoints import EndpointConfig

logger = logging.getLogger(__name__)

# Highly coupled with the entities configured on the Wit app, to be updated
# every time an entity is added there.
DEFAULT_DATA_TYPE_MAP = freeze_data_type_map(
    {
        "nb_persons": EntityType.INT,
        "intent": EntityType.INTENT,
        "datetime": EntityType.DATETIME,
    }
)


class WitParser(NaturalLanguageParser):
    """Normalizes the entities Wit attaches to a message."""

    def __init__(self, data_type_map: Optional[DataTypeMap] = None) -> None:
        self._data_type_map = (
            data_type_map if data_type_map is not None else DEFAULT_DATA_TYPE_MAP
        )

    @property
    def data_type_map(self) -> DataTypeMap:
        return self._data_type_map

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "WitParser":
        """Creates the parser.

        An optional `data_type_map` param, mapping raw keys to entity type
        names (`int`, `datetime`, ...), extends the default table.
        """
        overrides = params.get("data_type_map")
        if not overrides:
            return cls()

        if not isinstance(overrides, dict):
            raise InvalidOrMissingParam("data_type_map")

        data_type_map = dict(DEFAULT_DATA_TYPE_MAP)
        for key, type_name in overrides.items():
            try:
                data_type_map[key] = EntityType(type_name)
            except ValueError:
                raise InvalidOrMissingParam("data_type_map")

        return cls(freeze_data_type_map(data_type_map))


class WitApi:
    """
    wit http接口
    """

    def __init__(
        self,
        bearer_token: Text,
        api_version: Text = DEFAULT_WIT_API_VERSION,
        endpoint_config: Optional[EndpointConfig] = None,
    ) -> None:
        if endpoint_config:
            self.endpoint_config = endpoint_config
        else:
            self.endpoint_config = EndpointConfig(
                WIT_API_URL, params={"v": api_version}, bearer_token=bearer_token
            )

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "WitApi":
        return cls(
            get_param(params, "bearer_token", str),
            params.get("api_version", DEFAULT_WIT_API_VERSION),
        )

    async def get_intents(self) -> List[Intent]:
        try:
            response = await self.endpoint_config.request("get", "intents")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Could not fetch the intents from Wit: {e}")
            raise ConnectionException("Cannot fetch the intents from Wit.") from e

        if not isinstance(response, list):
            logger.error(f"Unexpected intent list from Wit: {response}")
            raise ConnectionException("Wit answered with an unexpected intent list.")

        intents = []
        for item in response:
            if not isinstance(item, dict) or not {"id", "name"} <= item.keys():
                logger.warning(f"Ignoring malformed intent returned by Wit: {item}")
                continue
            intents.append(Intent(item["id"], item["name"]))

        return intents


class WitRepository(NluRepository):
    """Gives access to the intents of a Wit app."""

    def __init__(self, api: WitApi) -> None:
        self.api = api

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "WitRepository":
        return cls(get_param(params, "api", WitApi))

    async def get_intents(self) -> List[Intent]:
        return await self.api.get_intents()
