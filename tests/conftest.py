"""Shared test fixtures for the convman test suite."""

import json
import uuid
from typing import Any, Callable, Dict, Optional

import pytest
from sanic import Sanic

from convman.bot import Bot
from convman.channels.facebook import FacebookMessengerApi
from convman.conversation.repository import InMemoryConversationRepository
from convman.nlu.wit import WitParser

# allows several apps, one per test, to be created in the same process
Sanic.test_mode = True

VERIFY_TOKEN = "app_verify_token"


@pytest.fixture
def wit_entities() -> Dict[str, Any]:
    """Entities as attached by Wit to a message asking for a table."""
    return {
        "intent": [{"confidence": 0.98, "value": "book_table"}],
        "nb_persons": [{"confidence": 0.87, "value": 3}],
        "datetime": [
            {
                "confidence": 0.9,
                "value": "2024-03-01T10:00:00Z",
                "grain": "hour",
                "type": "value",
            }
        ],
        "greetings": [{"confidence": 0.4, "value": "true"}],
    }


@pytest.fixture
def messenger_payload(wit_entities: Dict[str, Any]) -> Callable[..., Dict[str, Any]]:
    """Factory building the body of a Messenger webhook call with one message."""

    def _payload(
        sender_id: str = "1254459154682919",
        mid: str = "m_AG5Hz2Uq7tuwNEhXfYYKj8mJEM",
        text: str = "A table for 3 tomorrow at 10am",
        entities: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return {
            "object": "page",
            "entry": [
                {
                    "id": "682498302938465",
                    "time": 1458692752478,
                    "messaging": [
                        {
                            "sender": {"id": sender_id},
                            "recipient": {"id": "682498302938465"},
                            "timestamp": 1458692752478,
                            "message": {
                                "mid": mid,
                                "text": text,
                                "nlp": {
                                    "entities": wit_entities
                                    if entities is None
                                    else entities
                                },
                            },
                        }
                    ],
                }
            ],
        }

    return _payload


@pytest.fixture
def bot() -> Bot:
    """Bot wired to Wit, the in-memory repository and Messenger."""
    return Bot(
        parser=WitParser(),
        repository=InMemoryConversationRepository(),
        messenger=FacebookMessengerApi("page_token"),
        verify_token=VERIFY_TOKEN,
    )


@pytest.fixture
def app_name() -> str:
    return f"convman_test_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def config_file(tmp_path):
    """Factory writing a json config file, returns its path."""

    def _config_file(**overrides: Any) -> str:
        content = {
            "debug": False,
            "fb_verify_token": VERIFY_TOKEN,
            "fb_page_access_token": "page_token",
            "repository": "memory",
        }
        content.update(overrides)
        path = tmp_path / "config.json"
        path.write_text(json.dumps(content))
        return str(path)

    return _config_file
