from __future__ import annotations

import pytest

from monitor_relay.config import Settings
from monitor_relay.dispatch import DispatchContext

from .fakes import JOBS, OPERATOR, FakeGateway, FakeNotifier


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def ctx(notifier: FakeNotifier, gateway: FakeGateway) -> DispatchContext:
    return DispatchContext(
        notify=notifier,
        gateway=gateway,
        operator_chat_id=OPERATOR,
        jobs=JOBS,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        telegram_token="tg-token",
        telegram_chat_id=OPERATOR,
        github_token="gh-token",
        github_repository="acme/monitors",
        github_ref="main",
        webhook_path="/telegram/webhook",
        webhook_secret="s3cret",
        state_path=str(tmp_path / "state.json"),
    )
