import pytest

from monitor_relay.dispatch.admission import admit_update

from .fakes import OPERATOR, make_update


def test_admits_operator_and_trims_text():
    assert admit_update(make_update("  /status \n"), OPERATOR) == "/status"


def test_numeric_chat_id_is_compared_as_string():
    assert admit_update(make_update("/test", chat_id=int(OPERATOR)), OPERATOR) == "/test"


def test_message_without_text_is_admitted_as_empty():
    assert admit_update(make_update(None), OPERATOR) == ""


@pytest.mark.parametrize(
    "update",
    [
        {"update_id": 1},
        {"update_id": 1, "message": None},
        {"update_id": 1, "message": {"text": "/test"}},
        None,
        "not-an-update",
    ],
)
def test_drops_updates_without_a_usable_message(update):
    assert admit_update(update, OPERATOR) is None


def test_drops_foreign_chat():
    assert admit_update(make_update("/trigger", chat_id="999"), OPERATOR) is None


@pytest.mark.parametrize("operator", ["", "   ", None])
def test_drops_everything_when_no_operator_configured(operator):
    assert admit_update(make_update("/test"), operator) is None
