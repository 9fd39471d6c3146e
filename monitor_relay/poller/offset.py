from __future__ import annotations

from typing import Any, Iterable, Optional

from monitor_relay.poller.state import StateStore

BOT_UPDATE_KEY = "__bot_last_update_id__"


def _as_update_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def read_offset(store: StateStore) -> int:
    """Highest update id processed so far; 0 for a missing or corrupt value."""
    value = _as_update_id(store.get(BOT_UPDATE_KEY))
    if value is None or value < 0:
        return 0
    return value


def next_offset(previous: int) -> int:
    return previous + 1


def advance_offset(previous: int, updates: Iterable[Any]) -> int:
    """
    max(previous, every update_id in the batch). Never goes backwards;
    entries without a usable update_id are ignored.
    """
    highest = previous
    for update in updates:
        if not isinstance(update, dict):
            continue
        update_id = _as_update_id(update.get("update_id"))
        if update_id is not None and update_id > highest:
            highest = update_id
    return highest


def write_offset(store: StateStore, value: int) -> None:
    store.set(BOT_UPDATE_KEY, str(value))
