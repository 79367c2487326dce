# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   messages.py

@Time    :   2021/4/1 5:05 下午

@Desc    :   对话中的消息，每一类消息都有自己的type，存储时带上type以便反序列化

"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Text

from dateutil import parser

from convman.shared.nlu.parsed_data import ParsedData

logger = logging.getLogger(__name__)

MESSAGE_TYPE_KEY = "type"
MESSAGE_KEY = "message"


class UserMessage:
    """
    A message sent by a user to the bot, along with what the NLU understood.
    """

    type_name = "user"

    def __init__(
        self,
        mid: Text,
        sender_id: Text,
        recipient_id: Text,
        sent_at: datetime,
        text: Optional[Text] = None,
        quick_reply_payload: Optional[Text] = None,
        parsed_data: Optional[ParsedData] = None,
    ) -> None:
        self.mid = mid
        self.sender_id = sender_id
        self.recipient_id = recipient_id
        self.sent_at = sent_at
        self.text = text
        self.quick_reply_payload = quick_reply_payload
        self.parsed_data = parsed_data if parsed_data is not None else ParsedData()

    def __str__(self) -> Text:
        return f"UserMessage(mid: {self.mid}, text: {self.text})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, UserMessage):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def as_dict(self) -> Dict[Text, Any]:
        return {
            "mid": self.mid,
            "sender_id": self.sender_id,
            "recipient_id": self.recipient_id,
            "sent_at": self.sent_at.isoformat(),
            "text": self.text,
            "quick_reply_payload": self.quick_reply_payload,
            "nlp": self.parsed_data.as_dict(),
        }

    @classmethod
    def from_parameters(cls, parameters: Dict[Text, Any]) -> "UserMessage":
        return cls(
            parameters["mid"],
            parameters["sender_id"],
            parameters["recipient_id"],
            parser.isoparse(parameters["sent_at"]),
            parameters.get("text"),
            parameters.get("quick_reply_payload"),
            ParsedData.from_parameters(parameters.get("nlp")),
        )


MESSAGE_CLASSES = {UserMessage.type_name: UserMessage}


def serialise_message(message: UserMessage) -> Dict[Text, Any]:
    return {MESSAGE_TYPE_KEY: message.type_name, MESSAGE_KEY: message.as_dict()}


def deserialise_messages(serialized_messages: List[Dict[Text, Any]]) -> List[UserMessage]:
    """Convert a list of stored messages to the corresponding message objects.

    Example format:
        [{"type": "user", "message": {"mid": "m_1", "sender_id": "42", ...}}]
    """

    deserialised = []

    for m in serialized_messages:
        message_class = MESSAGE_CLASSES.get(m.get(MESSAGE_TYPE_KEY))
        if message_class is None:
            logger.warning(
                f"Unable to parse message of type '{m.get(MESSAGE_TYPE_KEY)}' while "
                f"deserialising. The message will be ignored."
            )
            continue

        deserialised.append(message_class.from_parameters(m[MESSAGE_KEY]))

    return deserialised
