from __future__ import annotations

import hmac
import json
import logging
import threading
from functools import partial
from typing import Any, Callable, Dict

from flask import Blueprint, Flask, current_app, jsonify, request

from monitor_relay.config import Settings
from monitor_relay.dispatch import DispatchContext, handle_update
from monitor_relay.dispatch.ux import LIVENESS_WEBHOOK
from monitor_relay.services import telegram
from monitor_relay.services.github import GitHubActions

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

Runner = Callable[[Callable[[], Any]], None]

api = Blueprint("api", __name__)


def run_in_background(job: Callable[[], Any]) -> None:
    """
    Default runner: process the update on a daemon thread so the HTTP
    acknowledgement never waits on GitHub or Telegram.
    """
    def _target() -> None:
        try:
            job()
        except Exception:  # noqa: BLE001
            logging.exception("[WEBHOOK] update processing failed")

    threading.Thread(target=_target, name="webhook-dispatch", daemon=True).start()


def _settings() -> Settings:
    return current_app.config["RELAY_SETTINGS"]


def build_context(settings: Settings) -> DispatchContext:
    return DispatchContext(
        notify=partial(
            telegram.send_message,
            settings.telegram_token,
            settings.telegram_chat_id,
            timeout=settings.http_timeout,
        ),
        gateway=GitHubActions(settings),
        operator_chat_id=settings.telegram_chat_id,
        liveness_text=LIVENESS_WEBHOOK,
    )


def _secret_matches(expected: str) -> bool:
    if not expected:
        return True
    provided = request.headers.get(SECRET_HEADER, "")
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@api.route("/", methods=["GET"])
@api.route("/healthz", methods=["GET"])
def healthcheck() -> Any:
    return jsonify({"ok": True, "mode": "webhook"})


def webhook() -> Any:
    """
    Telegram webhook endpoint.

    Order of checks:
    - shared secret header (401 on mismatch)
    - Telegram credentials configured (500 otherwise)
    - JSON body parses (500 otherwise)
    Then the update is acknowledged with 200 and handed to the runner.
    """
    settings = _settings()

    if not _secret_matches(settings.webhook_secret):
        logging.warning("[WEBHOOK] rejected request with bad secret token")
        return jsonify({"ok": False, "error": "unauthorized"}), 401

    if not settings.telegram_ready:
        logging.error("[WEBHOOK] Telegram credentials not configured")
        return jsonify({"ok": False, "error": "server_error"}), 500

    raw = request.get_data(cache=False)
    update: Dict[str, Any] | None = None
    if raw.strip():
        try:
            update = json.loads(raw)
        except ValueError as e:
            logging.error("[WEBHOOK] malformed update body: %s", e)
            return jsonify({"ok": False, "error": "server_error"}), 500

    if isinstance(update, dict):
        ctx = build_context(settings)
        runner: Runner = current_app.config["RELAY_RUNNER"]
        runner(partial(handle_update, update, ctx))

    return jsonify({"ok": True})


def register_routes(app: Flask, settings: Settings) -> None:
    app.register_blueprint(api)
    app.add_url_rule(settings.webhook_path, "webhook", webhook, methods=["POST"])

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(_e: Exception) -> Any:
        return jsonify({"ok": False}), 404
