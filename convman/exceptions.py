# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   exceptions.py

@Time    :   2021/4/15 3:54 下午

@Desc    :   异常处理

"""

from typing import Text

from convman.shared.exceptions import ConvmanException


class InvalidWebhookPayload(ConvmanException):
    """Raised when a webhook call does not carry a page event."""


class MessageDeliveryError(ConvmanException):
    """Raised when sending a message to a user fails.

    Attributes:
        recipient_id -- Id of the user the message was meant for.
    """

    def __init__(self, recipient_id: Text) -> None:
        self.recipient_id = recipient_id
        super(MessageDeliveryError, self).__init__()

    def __str__(self) -> Text:
        """Returns string representation of exception."""
        return f"Could not deliver the message to '{self.recipient_id}'"
