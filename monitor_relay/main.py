import logging
from typing import Optional

from flask import Flask

from monitor_relay.api.webhook import Runner, register_routes, run_in_background
from monitor_relay.config import Settings, load_settings


# ================================
# APP FACTORY
# ================================
def create_app(settings: Optional[Settings] = None, runner: Optional[Runner] = None) -> Flask:
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["RELAY_SETTINGS"] = settings
    app.config["RELAY_RUNNER"] = runner or run_in_background

    register_routes(app, settings)
    return app


# ================================
# START
# ================================
def serve(settings: Optional[Settings] = None) -> None:
    settings = settings or load_settings()
    app = create_app(settings)
    logging.info("[WEBHOOK] listening on :%s path=%s", settings.port, settings.webhook_path)
    app.run(host="0.0.0.0", port=settings.port)
