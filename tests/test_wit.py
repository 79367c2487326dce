"""Tests for the Wit backends."""

import asyncio
import json
from unittest.mock import AsyncMock

import aiohttp
import pytest

from convman.nlu.wit import DEFAULT_DATA_TYPE_MAP, WitApi, WitParser, WitRepository
from convman.shared.exceptions import ConnectionException, InvalidOrMissingParam
from convman.shared.nlu.interpreter import Intent
from convman.shared.nlu.parsed_data import EntityType, IntEntity, ParsedIntent


class TestWitParser:
    def test_default_table(self):
        assert WitParser.from_params({}).data_type_map == DEFAULT_DATA_TYPE_MAP

    def test_table_can_be_extended(self):
        parser = WitParser.from_params({"data_type_map": {"location": "scalar"}})

        assert parser.data_type_map["location"] == EntityType.SCALAR
        assert parser.data_type_map["nb_persons"] == EntityType.INT

    @pytest.mark.parametrize(
        "data_type_map", [["location"], {"location": "geo"}, "scalar"]
    )
    def test_invalid_table(self, data_type_map):
        with pytest.raises(InvalidOrMissingParam, match="data_type_map"):
            WitParser.from_params({"data_type_map": data_type_map})

    def test_parse(self, wit_entities):
        parsed = WitParser().parse_nlu_data(json.dumps(wit_entities).encode())

        assert parsed.intent == ParsedIntent("book_table")
        assert IntEntity("nb_persons", 0.87, 3, "") in parsed.entities
        # greetings is not part of the table
        assert len(parsed.entities) == 2


class TestWitApi:
    def test_bearer_token_is_sent_in_header(self):
        api = WitApi("wit_token")

        assert api.endpoint_config.headers["Authorization"] == "Bearer wit_token"
        assert api.endpoint_config.params == {"v": "20200513"}

    def test_from_params_requires_a_token(self):
        with pytest.raises(InvalidOrMissingParam, match="bearer_token"):
            WitApi.from_params({})

    def test_get_intents(self):
        api = WitApi("wit_token")
        api.endpoint_config.request = AsyncMock(
            return_value=[
                {"id": "2690212494559269", "name": "book_table"},
                {"id": "254954985556896", "name": "greet"},
            ]
        )

        intents = asyncio.run(api.get_intents())

        assert intents == [
            Intent("2690212494559269", "book_table"),
            Intent("254954985556896", "greet"),
        ]
        api.endpoint_config.request.assert_awaited_once_with("get", "intents")

    @pytest.mark.parametrize(
        "error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]
    )
    def test_get_intents_connection_error(self, error):
        api = WitApi("wit_token")
        api.endpoint_config.request = AsyncMock(side_effect=error)

        with pytest.raises(ConnectionException):
            asyncio.run(api.get_intents())

    @pytest.mark.parametrize(
        "response", [{"error": "Bad auth", "code": "no-auth"}, None, "intents"]
    )
    def test_get_intents_unexpected_answer(self, response):
        api = WitApi("wit_token")
        api.endpoint_config.request = AsyncMock(return_value=response)

        with pytest.raises(ConnectionException):
            asyncio.run(api.get_intents())

    def test_get_intents_skips_malformed_items(self, caplog):
        api = WitApi("wit_token")
        api.endpoint_config.request = AsyncMock(
            return_value=[{"id": "1"}, "greet", {"id": "2", "name": "book_table"}]
        )

        assert asyncio.run(api.get_intents()) == [Intent("2", "book_table")]
        assert "Ignoring malformed intent" in caplog.text


class TestWitRepository:
    def test_from_params(self):
        api = WitApi("wit_token")

        assert WitRepository.from_params({"api": api}).api is api

    @pytest.mark.parametrize("params", [{}, {"api": "wit_token"}])
    def test_from_params_requires_an_api(self, params):
        with pytest.raises(InvalidOrMissingParam) as error:
            WitRepository.from_params(params)

        assert error.value.key == "api"

    def test_get_intents_delegates_to_the_api(self):
        api = WitApi("wit_token")
        api.get_intents = AsyncMock(return_value=[Intent("1", "greet")])

        intents = asyncio.run(WitRepository(api).get_intents())

        assert intents == [Intent("1", "greet")]
        assert intents[0].as_dict() == {"id": "1", "name": "greet"}
