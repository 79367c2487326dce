"""Tests for the webhook server."""

from unittest.mock import AsyncMock

import pytest

import convman
from convman.server.run_server import create_app
from convman.shared.exceptions import ConnectionException
from convman.shared.nlu.interpreter import Intent
from convman.shared.nlu.parsed_data import ParsedIntent

WEBHOOK_QUERY = {
    "hub.mode": "subscribe",
    "hub.verify_token": "app_verify_token",
    "hub.challenge": "1158201444",
}


@pytest.fixture
def app(bot, app_name):
    return create_app(bot, app_name)


def test_hello(app):
    _, response = app.test_client.get("/")

    assert response.status == 200
    assert convman.__version__ in response.text


def test_version(app):
    _, response = app.test_client.get("/version")

    assert response.status == 200
    assert response.json == {"version": convman.__version__}


def test_webhook_verification(app):
    _, response = app.test_client.get("/webhook", params=WEBHOOK_QUERY)

    assert response.status == 200
    assert response.text == "1158201444"


@pytest.mark.parametrize(
    "query",
    [
        {**WEBHOOK_QUERY, "hub.verify_token": "wrong"},
        {**WEBHOOK_QUERY, "hub.mode": "unsubscribe"},
        {"hub.challenge": "1158201444"},
    ],
)
def test_webhook_verification_failure(app, query):
    _, response = app.test_client.get("/webhook", params=query)

    assert response.status == 403
    assert response.json["code"] == 403
    assert response.json["status"] == "failure"


def test_receive_message(app, bot, messenger_payload):
    _, response = app.test_client.post("/webhook", json=messenger_payload())

    assert response.status == 200
    assert response.text == "EVENT_RECEIVED"

    conversation = bot.repository.find_latest_conversation(
        bot.repository.find_user_by_fb_id("1254459154682919")
    )
    assert conversation.messages[0].parsed_data.intent == ParsedIntent("book_table")


def test_receive_not_a_page_event(app):
    _, response = app.test_client.post(
        "/webhook", json={"object": "instagram", "entry": []}
    )

    assert response.status == 400
    assert response.json["reason"] == "BadRequest"


def test_receive_store_failure(app, bot, messenger_payload):
    def failing_save(conversation):
        raise ConnectionException("mongo is down")

    bot.repository.save_conversation = failing_save

    _, response = app.test_client.post("/webhook", json=messenger_payload())

    assert response.status == 500
    assert response.json["reason"] == "ConversationStoreError"


def test_intents(app, bot):
    bot.nlu_repository = AsyncMock()
    bot.nlu_repository.get_intents.return_value = [Intent("1", "book_table")]

    _, response = app.test_client.get("/nlu/intents")

    assert response.status == 200
    assert response.json == [{"id": "1", "name": "book_table"}]


def test_intents_unavailable(app, bot):
    bot.nlu_repository = AsyncMock()
    bot.nlu_repository.get_intents.side_effect = ConnectionException("wit is down")

    _, response = app.test_client.get("/nlu/intents")

    assert response.status == 502
    assert response.json["reason"] == "NluUnavailable"
