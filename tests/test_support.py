import threading
import time

import pytest

from monitor_relay.cli import main as cli_main
from monitor_relay.config import DEFAULT_PORT, load_settings
from monitor_relay.dispatch.fanout import fan_out
from monitor_relay.dispatch.ux import format_run_status
from monitor_relay.errors import ConfigError, TelegramError
from monitor_relay.jobs import WorkflowRun
from monitor_relay.utils.time import format_utc


# ------------------------------------------------------------------ #
# fan_out
# ------------------------------------------------------------------ #
def test_fan_out_keeps_input_order():
    def slow_first(n):
        time.sleep(0.1 if n == 0 else 0)
        return n * 10

    assert fan_out(slow_first, [0, 1, 2]) == [0, 10, 20]


def test_fan_out_runs_concurrently():
    barrier = threading.Barrier(3, timeout=2)

    def meet(n):
        barrier.wait()
        return n

    assert fan_out(meet, [1, 2, 3]) == [1, 2, 3]


def test_fan_out_waits_for_all_before_raising():
    finished = []

    def work(n):
        if n == 0:
            raise ValueError("first")
        time.sleep(0.05)
        finished.append(n)
        return n

    with pytest.raises(ValueError):
        fan_out(work, [0, 1, 2])
    assert sorted(finished) == [1, 2]


def test_fan_out_empty():
    assert fan_out(lambda x: x, []) == []


# ------------------------------------------------------------------ #
# Formatting
# ------------------------------------------------------------------ #
def test_format_utc_normalizes_offsets():
    assert format_utc("2024-05-01T10:30:00+02:00") == "Wed, 01 May 2024 08:30:00 UTC"
    assert format_utc("2024-05-01T08:30:00Z") == "Wed, 01 May 2024 08:30:00 UTC"


def test_format_utc_passes_garbage_through():
    assert format_utc("yesterday") == "yesterday"


def test_format_run_status_prefers_conclusion():
    run = WorkflowRun(status="completed", event="workflow_dispatch", created_at="2024-05-01T08:30:00Z", conclusion="cancelled")
    assert format_run_status(run) == "cancelled (workflow_dispatch, Wed, 01 May 2024 08:30:00 UTC)"
    assert format_run_status(None) == "no runs yet"


def test_workflow_run_from_api_defaults():
    run = WorkflowRun.from_api({"status": "queued"})
    assert run.state == "queued"
    assert run.conclusion is None


# ------------------------------------------------------------------ #
# Configuration
# ------------------------------------------------------------------ #
def test_load_settings_defaults():
    settings = load_settings({})
    assert settings.github_ref == "main"
    assert settings.webhook_path == "/telegram/webhook"
    assert settings.port == DEFAULT_PORT
    assert not settings.telegram_ready


def test_load_settings_reads_env():
    settings = load_settings(
        {
            "TELEGRAM_TOKEN": "t",
            "TELEGRAM_CHAT_ID": " 42 ",
            "TELEGRAM_WEBHOOK_PATH": "hook",
            "PORT": "not-a-port",
            "GITHUB_REF_NAME": "release",
        }
    )
    assert settings.telegram_ready
    assert settings.telegram_chat_id == "42"
    assert settings.webhook_path == "/hook"
    assert settings.port == DEFAULT_PORT
    assert settings.github_ref == "release"


def test_github_context_requires_credentials():
    with pytest.raises(ConfigError):
        load_settings({"GITHUB_TOKEN": "x"}).github_context()
    assert load_settings({"GITHUB_TOKEN": "x", "GITHUB_REPOSITORY": "a/b"}).github_context() == ("x", "a/b", "main")


# ------------------------------------------------------------------ #
# CLI
# ------------------------------------------------------------------ #
def test_set_webhook_requires_public_url(monkeypatch):
    monkeypatch.setenv("TELEGRAM_TOKEN", "t")
    monkeypatch.delenv("BOT_PUBLIC_URL", raising=False)
    assert cli_main(["set-webhook"]) == 1


def test_set_webhook_joins_url(monkeypatch, capsys):
    seen = {}

    def fake_set_webhook(token, url, secret="", timeout=10):
        seen.update(token=token, url=url, secret=secret)
        return {"ok": True}

    monkeypatch.setenv("TELEGRAM_TOKEN", "t")
    monkeypatch.setenv("BOT_PUBLIC_URL", "https://relay.example.com")
    monkeypatch.setenv("TELEGRAM_WEBHOOK_SECRET", "s")
    monkeypatch.delenv("TELEGRAM_WEBHOOK_PATH", raising=False)
    monkeypatch.setattr("monitor_relay.cli.telegram.set_webhook", fake_set_webhook)

    assert cli_main(["set-webhook"]) == 0
    assert seen == {"token": "t", "url": "https://relay.example.com/telegram/webhook", "secret": "s"}
    assert '"ok": true' in capsys.readouterr().out


def test_poll_without_credentials_exits_cleanly(monkeypatch, tmp_path):
    monkeypatch.delenv("TELEGRAM_TOKEN", raising=False)
    monkeypatch.setenv("STATE_PATH", str(tmp_path / "state.json"))
    assert cli_main(["poll"]) == 0
    assert not (tmp_path / "state.json").exists()


def test_set_webhook_failure_prints_answer(monkeypatch, capsys):
    answer = {"ok": False, "description": "Bad Request: bad webhook"}

    def failing_set_webhook(token, url, secret="", timeout=10):
        raise TelegramError("setWebhook failed", 400, "bad", answer=answer)

    monkeypatch.setenv("TELEGRAM_TOKEN", "t")
    monkeypatch.setenv("BOT_PUBLIC_URL", "https://relay.example.com")
    monkeypatch.setattr("monitor_relay.cli.telegram.set_webhook", failing_set_webhook)

    assert cli_main(["set-webhook"]) == 1
    assert '"description": "Bad Request: bad webhook"' in capsys.readouterr().out
