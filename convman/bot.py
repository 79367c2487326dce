# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   bot.py

@Time    :   2021/4/19 3:12 下午

@Desc    :   bot的组装: 注册后端, 按配置创建后端, 处理收到的消息

"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Text

from convman.channels.facebook import (
    FacebookMessengerApi,
    FacebookReceivedMessage,
    MessengerApi,
    validate_webhook,
)
from convman.config import BotConfig
from convman.conversation.repository import (
    ConversationRepository,
    InMemoryConversationRepository,
    MongoConversationRepository,
)
from convman.nlu.wit import WitApi, WitParser, WitRepository
from convman.shared.conversation.conversation import Conversation, Status, User
from convman.shared.conversation.messages import UserMessage
from convman.shared.exceptions import MalformedPayload
from convman.shared.nlu.interpreter import Intent, NaturalLanguageParser, NluRepository
from convman.shared.nlu.parsed_data import ParsedData
from convman.shared.utils.registry import BackendRegistry

logger = logging.getLogger(__name__)


class Registries:
    """One backend registry per kind of pluggable backend."""

    def __init__(self) -> None:
        self.nlu_parsers: BackendRegistry[NaturalLanguageParser] = BackendRegistry(
            "nlu parser"
        )
        self.nlu_repositories: BackendRegistry[NluRepository] = BackendRegistry(
            "nlu repository"
        )
        self.conversation_repositories: BackendRegistry[
            ConversationRepository
        ] = BackendRegistry("conversation repository")
        self.messaging_apis: BackendRegistry[MessengerApi] = BackendRegistry(
            "messaging api"
        )


def register_default_backends(registries: Registries) -> Registries:
    """Registers every built-in backend. To be called once, before any lookup."""
    registries.nlu_parsers.register("wit", WitParser.from_params)
    registries.nlu_repositories.register("wit", WitRepository.from_params)
    registries.conversation_repositories.register(
        "memory", InMemoryConversationRepository.from_params
    )
    registries.conversation_repositories.register(
        "mongo", MongoConversationRepository.from_params
    )
    registries.messaging_apis.register("facebook", FacebookMessengerApi.from_params)
    return registries


def _nlu_repository_params(config: BotConfig) -> Dict[Text, Any]:
    if config.nlu_backend == "wit":
        return {"api": WitApi(config.wit_bearer_token)}
    return {}


def _conversation_repository_params(config: BotConfig) -> Dict[Text, Any]:
    if config.repository == "mongo":
        from pymongo import MongoClient

        client = MongoClient(
            host=config.db_host,
            username=config.db_user or None,
            password=config.db_pass or None,
        )
        return {"db": client[config.db_name]}
    return {}


def _messaging_api_params(config: BotConfig) -> Dict[Text, Any]:
    return {
        "page_access_token": config.fb_page_access_token,
        "api_version": config.fb_api_version,
    }


class Bot:
    """
    Glue between the messaging platform, the NLU backend and the storage.
    """

    def __init__(
        self,
        parser: NaturalLanguageParser,
        repository: ConversationRepository,
        messenger: MessengerApi,
        verify_token: Text = "",
        nlu_repository: Optional[NluRepository] = None,
    ) -> None:
        self.parser = parser
        self.repository = repository
        self.messenger = messenger
        self.verify_token = verify_token
        self.nlu_repository = nlu_repository

    @classmethod
    def create(
        cls, config: BotConfig, registries: Optional[Registries] = None
    ) -> "Bot":
        """Creates the bot's backends, by name, as set in the configuration.

        Raises:
            BackendNotFound: if a configured backend is not registered.
            InvalidOrMissingParam: if a backend can't be built from the config.
        """
        if registries is None:
            registries = register_default_backends(Registries())

        logger.debug(f"Creating bot with {config}.")

        return cls(
            parser=registries.nlu_parsers.create(config.nlu_backend),
            repository=registries.conversation_repositories.create(
                config.repository, _conversation_repository_params(config)
            ),
            messenger=registries.messaging_apis.create(
                config.messaging_api, _messaging_api_params(config)
            ),
            verify_token=config.fb_verify_token,
            nlu_repository=registries.nlu_repositories.create(
                config.nlu_backend, _nlu_repository_params(config)
            ),
        )

    def validate_webhook(self, values: Mapping[Text, List[Text]]) -> Optional[Text]:
        return validate_webhook(values, self.verify_token)

    def parse(self, raw_nlp: Optional[bytes]) -> ParsedData:
        """Normalizes the NLU data of a message, empty if it can't be read."""
        if not raw_nlp:
            return ParsedData()

        try:
            return self.parser.parse_nlu_data(raw_nlp)
        except MalformedPayload as e:
            logger.warning(f"Ignoring the NLU data of the message: {e}")
            return ParsedData()

    def get_or_create_user(self, fb_id: Text) -> User:
        user = self.repository.find_user_by_fb_id(fb_id)

        if user is None:
            user = User(fb_id)
            logger.debug(f"Inserting new user '{fb_id}'.")
            self.repository.insert_user(user)

        return user

    def handle_message_received(self, message: FacebookReceivedMessage) -> Conversation:
        """Stores a received message, with its NLU data, in the user's conversation.

        Returns:
            The conversation the message was added to.
        """
        parsed_data = self.parse(message.nlp)
        user = self.get_or_create_user(message.sender_id)

        conversation = self.repository.find_latest_conversation(user)
        if conversation is None or conversation.status == Status.OVER:
            conversation = Conversation.create_new()

        conversation.add_message(
            UserMessage(
                mid=message.mid,
                sender_id=message.sender_id,
                recipient_id=message.recipient_id,
                sent_at=message.sent_at,
                text=message.text,
                quick_reply_payload=message.quick_reply_payload,
                parsed_data=parsed_data,
            )
        )
        self.repository.save_conversation(conversation)

        logger.info(
            f"Message '{message.mid}' from '{message.sender_id}' stored in "
            f"conversation '{conversation.id}'."
        )
        return conversation

    async def send_text(self, recipient_id: Text, text: Text) -> None:
        await self.messenger.send_text_to_user(recipient_id, text)

    async def get_intents(self) -> List[Intent]:
        if self.nlu_repository is None:
            return []
        return await self.nlu_repository.get_intents()
