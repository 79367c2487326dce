# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   repository.py

@Time    :   2021/4/1 3:32 下午

@Desc    :   对话与用户的存储

"""

import copy
import logging
import uuid
from typing import Any, Dict, Iterable, Optional, Text

from convman.shared.conversation.conversation import Conversation, User, utc_now
from convman.shared.exceptions import ConnectionException
from convman.shared.utils.registry import get_param

logger = logging.getLogger(__name__)

CONVERSATION_COLLECTION = "conversation"
USER_COLLECTION = "user"


class ConversationRepository:
    """
    Represents common behavior and interface for all conversation repositories.
    """

    def find_latest_conversation(self, user: User) -> Optional[Conversation]:
        """Finds the latest conversation the user took part in.

        This method will be overridden by the specific repository.

        Args:
            user: The user whose messages are looked for.

        Returns:
            The most recently created conversation holding a message sent by
            the user, `None` for a user who never talked to the bot.
        """
        raise NotImplementedError()

    def save_conversation(self, conversation: Conversation) -> None:
        """Inserts a new conversation or updates an existing one."""
        raise NotImplementedError()

    def find_user_by_fb_id(self, fb_id: Text) -> Optional[User]:
        raise NotImplementedError()

    def insert_user(self, user: User) -> None:
        raise NotImplementedError()

    @staticmethod
    def _prepare_for_save(conversation: Conversation) -> bool:
        """Stamps the conversation before saving it. Returns `True` if it is new."""
        now = utc_now()
        conversation.updated_at = now

        if conversation.id is None:
            conversation.id = uuid.uuid4().hex
            conversation.created_at = now
            return True
        return False


class InMemoryConversationRepository(ConversationRepository):
    """Stores conversations and users in memory, serialised like in mongo."""

    def __init__(self) -> None:
        self.conversations: Dict[Text, Dict[Text, Any]] = {}
        self.users: Dict[Text, Dict[Text, Any]] = {}

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "InMemoryConversationRepository":
        return cls()

    def save_conversation(self, conversation: Conversation) -> None:
        if self._prepare_for_save(conversation):
            logger.debug(f"Inserting conversation '{conversation.id}'.")
        else:
            logger.debug(f"Updating conversation '{conversation.id}'.")

        self.conversations[conversation.id] = conversation.as_dict()

    def find_latest_conversation(self, user: User) -> Optional[Conversation]:
        logger.debug(f"Finding latest conversation for user '{user.fb_id}'.")

        candidates = [
            Conversation.from_parameters(copy.deepcopy(serialised))
            for serialised in self.conversations.values()
        ]
        candidates = [c for c in candidates if c.has_message_from(user.fb_id)]

        if not candidates:
            logger.debug("Latest conversation not found.")
            return None

        return max(candidates, key=lambda c: c.created_at)

    def find_user_by_fb_id(self, fb_id: Text) -> Optional[User]:
        for serialised in self.users.values():
            if serialised["fbid"] == fb_id:
                return User.from_parameters(serialised)
        return None

    def insert_user(self, user: User) -> None:
        self.users[user.id] = user.as_dict()

    def keys(self) -> Iterable[Text]:
        """Returns the ids of the stored conversations."""
        return self.conversations.keys()


class MongoConversationRepository(ConversationRepository):
    """
    Stores conversations and users in a mongo database.

    Property methods:
        conversations: returns the collection of the conversations
        users: returns the collection of the users
    """

    def __init__(self, db: Any) -> None:
        self.db = db

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "MongoConversationRepository":
        """Creates the repository. Expects a `pymongo` `Database` as `db` param."""
        from pymongo.database import Database

        return cls(get_param(params, "db", Database))

    @property
    def conversations(self):
        return self.db[CONVERSATION_COLLECTION]

    @property
    def users(self):
        return self.db[USER_COLLECTION]

    def save_conversation(self, conversation: Conversation) -> None:
        import pymongo.errors

        is_new = self._prepare_for_save(conversation)
        try:
            if is_new:
                logger.debug(f"Inserting conversation '{conversation.id}'.")
                self.conversations.insert_one(conversation.as_dict())
            else:
                logger.debug(f"Updating conversation '{conversation.id}'.")
                self.conversations.replace_one(
                    {"_id": conversation.id}, conversation.as_dict(), upsert=True
                )
        except pymongo.errors.PyMongoError as e:
            logger.info(f"Could not save the conversation '{conversation.id}': {e}")
            raise ConnectionException("Cannot save the conversation.") from e

    def find_latest_conversation(self, user: User) -> Optional[Conversation]:
        import pymongo
        import pymongo.errors

        logger.debug(f"Finding latest conversation for user '{user.fb_id}'.")

        try:
            serialised = self.conversations.find_one(
                {"messages": {"$elemMatch": {"message.sender_id": user.fb_id}}},
                sort=[("created_at", pymongo.DESCENDING)],
            )
        except pymongo.errors.PyMongoError as e:
            logger.info(f"Could not find the latest conversation: {e}")
            raise ConnectionException("Cannot find the latest conversation.") from e

        if serialised is None:
            logger.debug("Latest conversation not found.")
            return None

        logger.debug(f"Found latest conversation '{serialised['_id']}'.")
        return Conversation.from_parameters(serialised)

    def find_user_by_fb_id(self, fb_id: Text) -> Optional[User]:
        import pymongo.errors

        try:
            serialised = self.users.find_one({"fbid": fb_id})
        except pymongo.errors.PyMongoError as e:
            logger.info(f"Could not find the user '{fb_id}': {e}")
            raise ConnectionException("Cannot find the user.") from e

        return User.from_parameters(serialised) if serialised else None

    def insert_user(self, user: User) -> None:
        import pymongo.errors

        try:
            self.users.insert_one(user.as_dict())
        except pymongo.errors.PyMongoError as e:
            logger.info(f"Could not insert the user '{user.fb_id}': {e}")
            raise ConnectionException("Cannot insert the user.") from e
