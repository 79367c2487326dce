# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   facebook.py

@Time    :   2021/4/19 10:05 上午

@Desc    :   facebook messenger 接入: webhook校验, 消息解析, 消息发送

"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Text

import aiohttp

from convman.exceptions import InvalidWebhookPayload, MessageDeliveryError
from convman.shared.dialogue_config import DEFAULT_FB_API_VERSION, FB_GRAPH_API_URL
from convman.shared.utils.registry import get_param
from convman.utils.endpoints import EndpointConfig

logger = logging.getLogger(__name__)


class FacebookReceivedMessage(NamedTuple):
    """A message a user sent to the page."""

    mid: Text
    sender_id: Text
    recipient_id: Text
    sent_at: datetime
    text: Optional[Text] = None
    quick_reply_payload: Optional[Text] = None
    # raw json of the entities the built-in NLP attached to the message
    nlp: Optional[bytes] = None


def _get_single_query_param(
    values: Mapping[Text, List[Text]], key: Text
) -> Optional[Text]:
    params = values.get(key)

    if not params or len(params) != 1:
        return None

    return params[0]


def validate_webhook(
    values: Mapping[Text, List[Text]], verify_token: Text
) -> Optional[Text]:
    """Answers the webhook verification request sent by Facebook.

    More information here:
    https://developers.facebook.com/docs/messenger-platform/getting-started/quick-start

    Args:
        values: The query parameters of the request, each with all its values.
        verify_token: The token configured on the Facebook app.

    Returns:
        The `hub.challenge` to write back, `None` if the request is not valid.
    """
    if _get_single_query_param(values, "hub.mode") != "subscribe":
        return None

    token = _get_single_query_param(values, "hub.verify_token")
    if not verify_token or token != verify_token:
        logger.warning("Webhook verification failed: the verify token does not match.")
        return None

    return _get_single_query_param(values, "hub.challenge")


def _timestamp_to_datetime(timestamp: Any) -> datetime:
    # messenger timestamps are in milliseconds
    return datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc)


def _to_received_message(event: Dict[Text, Any]) -> Optional[FacebookReceivedMessage]:
    message = event.get("message")
    if not isinstance(message, dict) or message.get("is_echo"):
        return None

    nlp = message.get("nlp")
    quick_reply = message.get("quick_reply") or {}

    return FacebookReceivedMessage(
        mid=message["mid"],
        sender_id=event["sender"]["id"],
        recipient_id=event["recipient"]["id"],
        sent_at=_timestamp_to_datetime(event["timestamp"]),
        text=message.get("text"),
        quick_reply_payload=quick_reply.get("payload"),
        nlp=(
            json.dumps(nlp.get("entities", {})).encode("utf-8")
            if isinstance(nlp, dict)
            else None
        ),
    )


class MessengerApi:
    """
    Interface of the messaging platforms the bot talks through.
    """

    def parse_messages(self, payload: Dict[Text, Any]) -> List[FacebookReceivedMessage]:
        raise NotImplementedError()

    async def send_text_to_user(self, recipient_id: Text, text: Text) -> None:
        raise NotImplementedError()


class FacebookMessengerApi(MessengerApi):
    """Messenger platform: webhook payloads in, Send API out."""

    def __init__(
        self,
        page_access_token: Text,
        api_version: Text = DEFAULT_FB_API_VERSION,
        endpoint_config: Optional[EndpointConfig] = None,
    ) -> None:
        if endpoint_config:
            self.endpoint_config = endpoint_config
        else:
            self.endpoint_config = EndpointConfig(
                f"{FB_GRAPH_API_URL}/{api_version}",
                token=page_access_token,
                token_name="access_token",
            )

    @classmethod
    def from_params(cls, params: Dict[Text, Any]) -> "FacebookMessengerApi":
        return cls(
            get_param(params, "page_access_token", str),
            params.get("api_version") or DEFAULT_FB_API_VERSION,
        )

    def parse_messages(self, payload: Dict[Text, Any]) -> List[FacebookReceivedMessage]:
        """Extracts the messages of a webhook call.

        Events which are not messages (deliveries, reads, echoes) are skipped,
        so is any malformed event.

        Raises:
            InvalidWebhookPayload: if the payload is not a page event.
        """
        if not isinstance(payload, dict) or payload.get("object") != "page":
            raise InvalidWebhookPayload("The webhook payload is not a page event.")

        messages = []
        for entry in payload.get("entry") or []:
            if not isinstance(entry, dict):
                continue
            for event in entry.get("messaging") or []:
                try:
                    message = _to_received_message(event)
                except (
                    AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError
                ) as e:
                    logger.warning(f"Ignoring malformed messaging event: {e!r}")
                    continue

                if message is not None:
                    messages.append(message)

        return messages

    async def send_text_to_user(self, recipient_id: Text, text: Text) -> None:
        try:
            await self.endpoint_config.request(
                "post",
                "me/messages",
                json={
                    "messaging_type": "RESPONSE",
                    "recipient": {"id": recipient_id},
                    "message": {"text": text},
                },
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Could not send the message to '{recipient_id}': {e}")
            raise MessageDeliveryError(recipient_id) from e
