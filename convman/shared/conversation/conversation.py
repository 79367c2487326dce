# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   conversation.py

@Time    :   2021/4/2 3:33 下午

@Desc    :

"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Text

from dateutil import parser

from convman.shared.conversation.messages import (
    UserMessage,
    deserialise_messages,
    serialise_message,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Status(Enum):
    """Who, if anyone, is currently handling the conversation."""

    ONGOING = "ongoing"
    HUMAN_INTERVENTION = "human"
    OVER = "over"


class User:
    """
    用户, fb_id 是messenger的page scoped id
    """

    def __init__(
        self,
        fb_id: Text,
        id: Optional[Text] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.id = id or uuid.uuid4().hex
        self.fb_id = fb_id
        self.created_at = created_at or utc_now()

    def __repr__(self) -> Text:
        return f"<User({self.id}, fb_id: {self.fb_id})>"

    def as_dict(self) -> Dict[Text, Any]:
        return {
            "_id": self.id,
            "fbid": self.fb_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_parameters(cls, parameters: Dict[Text, Any]) -> "User":
        return cls(
            parameters["fbid"],
            parameters["_id"],
            parser.isoparse(parameters["created_at"]),
        )


class Conversation:
    """
    对话实例构造
    """

    def __init__(
        self,
        status: Status = Status.ONGOING,
        current_step: Text = "",
        messages: Optional[List[UserMessage]] = None,
        id: Optional[Text] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        """
        初始化一个对话, id 在第一次保存时才分配
        """
        now = utc_now()
        self.id = id
        self.status = status
        self.current_step = current_step
        self.messages = messages if messages is not None else []
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    @classmethod
    def create_new(cls) -> "Conversation":
        return cls()

    def __str__(self) -> Text:
        """
        This function returns the conversation and its messages.
        """
        return "Conversation '{}' ({}) with messages:\n{}".format(
            self.id,
            self.status.value,
            "\n\n".join([f"\t{m}" for m in self.messages]),
        )

    def add_message(self, message: UserMessage) -> None:
        self.messages.append(message)

    def is_new(self) -> bool:
        return len(self.messages) == 0

    def has_message_from(self, sender_id: Text) -> bool:
        return any(message.sender_id == sender_id for message in self.messages)

    def as_dict(self) -> Dict[Text, Any]:
        """
        This function returns the conversation as a dictionary to assist in
        serialization.
        :return:
        """
        return {
            "_id": self.id,
            "status": self.status.value,
            "step": self.current_step,
            "messages": [serialise_message(message) for message in self.messages],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_parameters(cls, parameters: Dict[Text, Any]) -> "Conversation":
        """Create `Conversation` from parameters.

        Args:
            parameters: Serialised conversation, as returned by `as_dict`.

        Returns:
            Deserialised `Conversation`.

        """

        return cls(
            Status(parameters.get("status", Status.ONGOING.value)),
            parameters.get("step", ""),
            deserialise_messages(parameters.get("messages") or []),
            parameters.get("_id"),
            parser.isoparse(parameters["created_at"]),
            parser.isoparse(parameters["updated_at"]),
        )
