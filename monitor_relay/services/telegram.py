# monitor_relay/services/telegram.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from monitor_relay.errors import TelegramError

TELEGRAM_API_ROOT = "https://api.telegram.org"
DEFAULT_TIMEOUT = 10.0


def _url(token: str, endpoint: str) -> str:
    return f"{TELEGRAM_API_ROOT}/bot{token}/{endpoint}"


def send_message(
    token: str,
    chat_id: int | str,
    text: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    """
    Send an HTML-formatted message to a Telegram chat.

    Delivery failures are logged and reported through the return value;
    they never propagate to the caller.
    """
    payload: Dict[str, Any] = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "HTML",
        "disable_web_page_preview": False,
    }
    try:
        resp = requests.post(_url(token, "sendMessage"), json=payload, timeout=timeout)
    except requests.RequestException as e:
        logging.error("[TELEGRAM ERROR] sendMessage transport failure: %s", e)
        return False

    if not resp.ok:
        logging.error("[TELEGRAM ERROR] sendMessage failed: %s %s", resp.status_code, resp.text)
        return False
    return True


def get_updates(token: str, offset: int, timeout: float = DEFAULT_TIMEOUT) -> List[Dict[str, Any]]:
    """
    Fetch every pending update with id >= offset, without long polling.

    Raises:
        TelegramError on a non-success answer.
        requests.RequestException on transport failure.
    """
    resp = requests.get(
        _url(token, "getUpdates"),
        params={"offset": offset, "timeout": 0},
        timeout=timeout,
    )
    if not resp.ok:
        raise TelegramError("getUpdates failed", resp.status_code, resp.text)

    try:
        data = resp.json()
    except ValueError as e:
        raise TelegramError("getUpdates returned invalid JSON", resp.status_code, resp.text) from e

    if not isinstance(data, dict) or not data.get("ok"):
        raise TelegramError("getUpdates answered ok=false", resp.status_code, resp.text)

    result = data.get("result") or []
    return [u for u in result if isinstance(u, dict)]


def set_webhook(
    token: str,
    url: str,
    secret: str = "",
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """
    Point the bot at a public webhook URL.

    Returns the decoded Telegram answer. Raises TelegramError on a
    non-success status.
    """
    body: Dict[str, Any] = {"url": url}
    if secret:
        body["secret_token"] = secret

    resp = requests.post(_url(token, "setWebhook"), json=body, timeout=timeout)
    try:
        answer = resp.json()
    except ValueError:
        answer = {"ok": False, "description": resp.text}

    if not resp.ok:
        raise TelegramError("setWebhook failed", resp.status_code, resp.text, answer=answer)
    return answer
