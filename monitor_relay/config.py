# monitor_relay/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from monitor_relay.errors import ConfigError

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"

DEFAULT_GITHUB_REF = "main"
DEFAULT_WEBHOOK_PATH = "/telegram/webhook"
DEFAULT_PORT = 3000
DEFAULT_STATE_FILE = "state.json"
DEFAULT_HTTP_TIMEOUT = 10.0


def _int(raw: Optional[str], fallback: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return fallback


def _float(raw: Optional[str], fallback: float) -> float:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True)
class Settings:
    telegram_token: str = ""
    telegram_chat_id: str = ""
    github_token: str = ""
    github_repository: str = ""
    github_ref: str = DEFAULT_GITHUB_REF
    webhook_path: str = DEFAULT_WEBHOOK_PATH
    webhook_secret: str = ""
    port: int = DEFAULT_PORT
    public_url: str = ""
    state_path: str = DEFAULT_STATE_FILE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = "INFO"

    @property
    def telegram_ready(self) -> bool:
        return bool(self.telegram_token and self.telegram_chat_id)

    def github_context(self) -> Tuple[str, str, str]:
        """
        Return (token, repository, ref) for the Actions API.

        Raises ConfigError before any network call is attempted.
        """
        if not self.github_token or not self.github_repository:
            raise ConfigError("GitHub credentials not configured (GITHUB_TOKEN/GITHUB_REPOSITORY)")
        return self.github_token, self.github_repository, self.github_ref


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the process environment.

    Read on every call so a long-running server and tests both see the
    current values.
    """
    env = os.environ if environ is None else environ

    def get(name: str, default: str = "") -> str:
        return (env.get(name) or default).strip()

    path = get("TELEGRAM_WEBHOOK_PATH", DEFAULT_WEBHOOK_PATH)
    if not path.startswith("/"):
        path = "/" + path

    return Settings(
        telegram_token=get("TELEGRAM_TOKEN"),
        telegram_chat_id=get("TELEGRAM_CHAT_ID"),
        github_token=get("GITHUB_TOKEN"),
        github_repository=get("GITHUB_REPOSITORY"),
        github_ref=get("GITHUB_REF_NAME", DEFAULT_GITHUB_REF),
        webhook_path=path,
        webhook_secret=get("TELEGRAM_WEBHOOK_SECRET"),
        port=_int(env.get("PORT"), DEFAULT_PORT),
        public_url=get("BOT_PUBLIC_URL"),
        state_path=get("STATE_PATH", os.path.join(os.getcwd(), DEFAULT_STATE_FILE)),
        http_timeout=_float(env.get("HTTP_TIMEOUT"), DEFAULT_HTTP_TIMEOUT),
        log_level=get("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
