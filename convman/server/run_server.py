# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   run_server.py

@Time    :   2020/8/26 2:50 下午

@Desc    :   webhook 服务

"""
import asyncio
import logging
from http import HTTPStatus
from typing import Any, Optional, Text, Union

from sanic import Sanic, response
from sanic.response import text, HTTPResponse
from sanic.request import Request

import convman
from convman.bot import Bot
from convman.config import CONFIG, BotConfig
from convman.exceptions import InvalidWebhookPayload
from convman.shared.exceptions import ConnectionException

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "convman"


class ErrorResponse(Exception):
    """Common exception to handle failing API requests."""

    def __init__(
        self,
        status: Union[int, HTTPStatus],
        reason: Text,
        message: Text,
        details: Any = None,
        help_url: Optional[Text] = None,
    ) -> None:
        """Creates error.

        Args:
            status: The HTTP status code to return.
            reason: Short summary of the error.
            message: Detailed explanation of the error.
            details: Additional details which describe the error. Must be serializable.
            help_url: URL where users can get further help (e.g. docs).
        """
        self.error_info = {
            "version": convman.__version__,
            "status": "failure",
            "message": message,
            "reason": reason,
            "details": details or {},
            "help": help_url,
            "code": int(status),
        }
        self.status = int(status)
        logger.error(message)
        super(ErrorResponse, self).__init__()


def create_app(bot: Bot, name: Text = DEFAULT_APP_NAME) -> Sanic:
    """Creates the webhook server of `bot`."""
    app = Sanic(name)
    app.update_config(CONFIG)  # 系统配置信息
    app.ctx.bot = bot

    @app.exception(ErrorResponse)
    async def handle_error_response(request: Request, exception: ErrorResponse):
        return response.json(exception.error_info, status=exception.status)

    @app.get("/")
    async def hello(request: Request):
        return text('Welcome to convman, current version is: ' + convman.__version__)

    @app.get('/version')
    async def version(request: Request):
        """
        Get version information
        :param request:
        :return:
        """
        return response.json({"version": convman.__version__})

    @app.get("/webhook")
    async def validate_webhook(request: Request) -> HTTPResponse:
        """
        facebook 校验 webhook, 原样返回 hub.challenge
        """
        values = {key: request.args.getlist(key) for key in request.args}
        challenge = request.app.ctx.bot.validate_webhook(values)

        if challenge is None:
            raise ErrorResponse(
                HTTPStatus.FORBIDDEN,
                "Forbidden",
                "The webhook verification failed.",
                {"parameters": ["hub.mode", "hub.verify_token", "hub.challenge"],
                 "in": "query"},
            )

        return text(challenge)

    @app.post("/webhook")
    async def receive_message(request: Request) -> HTTPResponse:
        """
        接收用户消息, 解析nlu数据后存入对话
        """
        bot = request.app.ctx.bot

        try:
            messages = bot.messenger.parse_messages(request.json)
        except InvalidWebhookPayload as e:
            raise ErrorResponse(HTTPStatus.BAD_REQUEST, "BadRequest", str(e))

        loop = asyncio.get_running_loop()
        for message in messages:
            try:
                # the repositories are blocking
                await loop.run_in_executor(None, bot.handle_message_received, message)
            except ConnectionException as e:
                raise ErrorResponse(
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                    "ConversationStoreError",
                    f"Could not store the message '{message.mid}': {e}",
                )

        return text("EVENT_RECEIVED")

    @app.get("/nlu/intents")
    async def intents(request: Request) -> HTTPResponse:
        try:
            known_intents = await request.app.ctx.bot.get_intents()
        except ConnectionException as e:
            raise ErrorResponse(HTTPStatus.BAD_GATEWAY, "NluUnavailable", str(e))

        return response.json([intent.as_dict() for intent in known_intents])

    return app


def serve(config: BotConfig, port: Optional[int] = None) -> None:
    """Creates the bot described by `config` and serves its webhooks."""
    bot = Bot.create(config)
    app = create_app(bot)

    port = port or config.listening_port
    logger.info(f"convman loading, listening on port {port}...")
    app.run(host="0.0.0.0", port=port, debug=config.debug, single_process=True)
