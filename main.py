from monitor_relay.config import configure_logging, load_settings
from monitor_relay.main import create_app, serve

settings = load_settings()
configure_logging(settings)

# === WEBHOOK APP ===
app = create_app(settings)


if __name__ == "__main__":
    serve(settings)
