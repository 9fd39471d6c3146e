from __future__ import annotations

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base class for every failure the relay knows how to report."""


class ConfigError(RelayError):
    """Credentials or identity are missing from the environment."""


class RemoteError(RelayError):
    """
    A remote API answered with a non-success status.

    The status code and body are kept for logging only; they must never
    be echoed back into the chat.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        body: str = "",
        answer: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.answer = answer

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code:
            return f"{base}: {self.status_code} {self.body}"
        return base


class GitHubError(RemoteError):
    """GitHub Actions REST API failure."""


class TelegramError(RemoteError):
    """Telegram Bot API failure."""
