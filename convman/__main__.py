# -*- coding: utf-8 -*-

"""
@Author  :   Xu

@Software:   PyCharm

@File    :   __main__.py

@Time    :   2021/4/20 10:02 上午

@Desc    :   命令行入口

"""

import argparse
import logging
import sys
from typing import List, Optional, Text

import convman
from convman.bot import Bot
from convman.config import load_config
from convman.shared.dialogue_config import DEFAULT_CONFIG_PATH
from convman.shared.exceptions import ConvmanException
import convman.shared.utils.io
from convman.utils.common import configure_logging

logger = logging.getLogger(__name__)


def create_argument_parser() -> argparse.ArgumentParser:
    """Parse all the command line arguments for the convman script."""
    parser = argparse.ArgumentParser(
        prog="convman",
        description="Messenger bot backend storing conversations and their NLU data.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Print installed convman version",
    )

    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Config file path",
    )

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser(
        "run",
        parents=[parent_parser],
        help="Starts the webhook server.",
    )
    run_parser.add_argument(
        "-p", "--port", type=int, default=None, help="Overrides the listening port."
    )
    run_parser.set_defaults(func=run)

    receive_parser = subparsers.add_parser(
        "receive",
        parents=[parent_parser],
        help="Sends a message to the bot, in order to fake a message sent by a user.",
    )
    receive_parser.add_argument(
        "-d",
        "--data",
        type=str,
        required=True,
        help="Webhook payload (json) as sent by Facebook.",
    )
    receive_parser.set_defaults(func=receive)

    return parser


def run(args: argparse.Namespace) -> None:
    from convman.server.run_server import serve

    config = load_config(args.config)
    configure_logging(config.debug)
    serve(config, args.port)


def receive(args: argparse.Namespace) -> None:
    config = load_config(args.config)
    configure_logging(config.debug)

    bot = Bot.create(config)
    payload = convman.shared.utils.io.read_json_file(args.data)

    for message in bot.messenger.parse_messages(payload):
        conversation = bot.handle_message_received(message)
        print(
            convman.shared.utils.io.json_to_string(
                {
                    "mid": message.mid,
                    "conversation": conversation.id,
                    "nlp": conversation.messages[-1].parsed_data.as_dict(),
                }
            )
        )


def main(argv: Optional[List[Text]] = None) -> None:
    arg_parser = create_argument_parser()
    cmdline_arguments = arg_parser.parse_args(argv)

    if hasattr(cmdline_arguments, "version"):
        print(convman.__version__)
        return

    if not hasattr(cmdline_arguments, "func"):
        arg_parser.print_help()
        sys.exit(1)

    try:
        cmdline_arguments.func(cmdline_arguments)
    except ConvmanException as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
