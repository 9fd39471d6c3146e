from __future__ import annotations

from typing import Any, Optional


def admit_update(update: Any, operator_chat_id: str) -> Optional[str]:
    """
    Decide whether an inbound update comes from the operator.

    Returns None to drop the update, otherwise the trimmed message text
    ("" when the message has no text). Pure: no I/O, no logging.
    """
    if not isinstance(update, dict):
        return None

    message = update.get("message")
    if not isinstance(message, dict):
        return None

    expected = str(operator_chat_id or "").strip()
    if not expected:
        return None

    chat = message.get("chat")
    if not isinstance(chat, dict) or chat.get("id") is None:
        return None
    if str(chat["id"]) != expected:
        return None

    text = message.get("text")
    if not isinstance(text, str):
        return ""
    return text.strip()
