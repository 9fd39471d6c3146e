# monitor_relay/poller/cycle.py
from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Optional

import requests

from monitor_relay.config import Settings
from monitor_relay.dispatch import DispatchContext, handle_update
from monitor_relay.dispatch.ux import LIVENESS_POLLING
from monitor_relay.errors import RelayError
from monitor_relay.poller.offset import advance_offset, next_offset, read_offset, write_offset
from monitor_relay.poller.state import StateStore
from monitor_relay.services import telegram
from monitor_relay.services.github import GitHubActions

FetchUpdates = Callable[[int], List[Dict[str, Any]]]


def run_poll_cycle(
    settings: Settings,
    store: Optional[StateStore] = None,
    gateway: Any = None,
    fetch: Optional[FetchUpdates] = None,
    notify: Optional[Callable[[str], bool]] = None,
) -> Optional[int]:
    """
    One poll cycle: fetch -> admit/route each update -> persist offset.

    Returns the offset stored at the end of the cycle, or None when the
    cycle was aborted before fetching anything useful (missing
    credentials, Telegram unreachable).

    The offset is advanced past every fetched update whether or not its
    command succeeded; a failed command is retried only by the operator
    sending it again.
    """
    if not settings.telegram_ready:
        logging.warning("[POLL] credentials not set")
        return None

    store = store or StateStore(settings.state_path)
    fetch = fetch or partial(telegram.get_updates, settings.telegram_token, timeout=settings.http_timeout)
    notify = notify or partial(
        telegram.send_message,
        settings.telegram_token,
        settings.telegram_chat_id,
        timeout=settings.http_timeout,
    )

    previous = read_offset(store)
    try:
        updates = fetch(next_offset(previous))
    except (RelayError, requests.RequestException) as e:
        logging.error("[POLL] getUpdates failed: %s", e)
        return None

    if not updates:
        logging.info("[POLL] no new updates after %s", previous)
        return previous

    ctx = DispatchContext(
        notify=notify,
        gateway=gateway or GitHubActions(settings),
        operator_chat_id=settings.telegram_chat_id,
        liveness_text=LIVENESS_POLLING,
    )

    for update in updates:
        try:
            handle_update(update, ctx)
        except Exception:  # noqa: BLE001
            update_id = update.get("update_id") if isinstance(update, dict) else None
            logging.exception("[POLL] handler crashed on update %s", update_id)

    highest = advance_offset(previous, updates)
    write_offset(store, highest)
    logging.info("[POLL] processed %d update(s), offset %s -> %s", len(updates), previous, highest)
    return highest
