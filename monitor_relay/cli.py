from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional
from urllib.parse import urljoin

import requests

from monitor_relay.config import Settings, configure_logging, load_settings
from monitor_relay.errors import TelegramError
from monitor_relay.main import serve
from monitor_relay.poller.cycle import run_poll_cycle
from monitor_relay.services import telegram


def cmd_poll(settings: Settings) -> int:
    run_poll_cycle(settings)
    return 0


def cmd_serve(settings: Settings) -> int:
    serve(settings)
    return 0


def cmd_set_webhook(settings: Settings) -> int:
    if not settings.telegram_token or not settings.public_url:
        logging.error("Missing TELEGRAM_TOKEN or BOT_PUBLIC_URL")
        return 1

    url = urljoin(settings.public_url, settings.webhook_path)
    try:
        answer = telegram.set_webhook(
            settings.telegram_token,
            url,
            secret=settings.webhook_secret,
            timeout=settings.http_timeout,
        )
    except TelegramError as e:
        logging.error("[SET WEBHOOK] %s", e)
        if e.answer is not None:
            print(json.dumps(e.answer, indent=2))
        return 1
    except requests.RequestException as e:
        logging.error("[SET WEBHOOK] %s", e)
        return 1

    print(json.dumps(answer, indent=2))
    return 0


COMMANDS = {
    "poll": cmd_poll,
    "serve": cmd_serve,
    "set-webhook": cmd_set_webhook,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monitor-relay",
        description="Control the monitor workflows from a Telegram chat.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("poll", help="run one getUpdates cycle and exit")
    sub.add_parser("serve", help="run the webhook server")
    sub.add_parser("set-webhook", help="register BOT_PUBLIC_URL + webhook path with Telegram")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings)
    return COMMANDS[args.command](settings)


if __name__ == "__main__":
    sys.exit(main())
