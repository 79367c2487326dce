"""Tests for conversations, users and their messages."""

from datetime import datetime, timezone

import pytest

from convman.shared.conversation.conversation import Conversation, Status, User
from convman.shared.conversation.messages import (
    UserMessage,
    deserialise_messages,
    serialise_message,
)
from convman.shared.nlu.parsed_data import IntEntity, ParsedData, ParsedIntent

SENT_AT = datetime(2016, 3, 22, 23, 25, 52, tzinfo=timezone.utc)


@pytest.fixture
def message() -> UserMessage:
    return UserMessage(
        mid="m_1",
        sender_id="1254459154682919",
        recipient_id="682498302938465",
        sent_at=SENT_AT,
        text="table for 3",
        parsed_data=ParsedData(
            ParsedIntent("book_table"), (IntEntity("nb_persons", 0.87, 3),)
        ),
    )


class TestUserMessage:
    def test_round_trip(self, message):
        assert UserMessage.from_parameters(message.as_dict()) == message

    def test_stored_with_its_type(self, message):
        serialised = serialise_message(message)

        assert serialised["type"] == "user"
        assert serialised["message"]["nlp"]["intent"] == {"name": "book_table"}

    def test_unknown_types_are_skipped(self, message, caplog):
        messages = deserialise_messages(
            [{"type": "bot", "message": {}}, serialise_message(message)]
        )

        assert messages == [message]
        assert "Unable to parse message of type 'bot'" in caplog.text

    def test_defaults_to_empty_parsed_data(self):
        message = UserMessage("m_2", "1", "2", SENT_AT)

        assert message.parsed_data == ParsedData()


class TestConversation:
    def test_create_new(self):
        conversation = Conversation.create_new()

        assert conversation.id is None
        assert conversation.status == Status.ONGOING
        assert conversation.is_new()

    def test_add_message(self, message):
        conversation = Conversation.create_new()
        conversation.add_message(message)

        assert not conversation.is_new()
        assert conversation.has_message_from("1254459154682919")
        assert not conversation.has_message_from("someone else")

    def test_round_trip(self, message):
        conversation = Conversation(
            status=Status.HUMAN_INTERVENTION, current_step="ask_date", id="abc"
        )
        conversation.add_message(message)

        restored = Conversation.from_parameters(conversation.as_dict())

        assert restored.id == "abc"
        assert restored.status == Status.HUMAN_INTERVENTION
        assert restored.current_step == "ask_date"
        assert restored.messages == [message]
        assert restored.created_at == conversation.created_at


class TestUser:
    def test_round_trip(self):
        user = User("1254459154682919")

        restored = User.from_parameters(user.as_dict())

        assert restored.id == user.id
        assert restored.fb_id == user.fb_id
        assert restored.created_at == user.created_at

    def test_ids_are_unique(self):
        assert User("1").id != User("1").id
