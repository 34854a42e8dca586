import inspect

import pytest

from orderflow.app.providers import base, email_stub, slack_stub


@pytest.mark.parametrize("module", [email_stub, slack_stub])
def test_provider_matches_base_signature(module):
    assert inspect.signature(module.send).parameters.keys() == inspect.signature(
        base.send
    ).parameters.keys()


def test_base_provider_is_abstract():
    with pytest.raises(NotImplementedError):
        base.send("stock.low", {}, None)


def test_email_stub_records_message():
    email_stub.send("stock.low", {"subject": "Low", "text": "t"}, "owner@example.com")
    assert email_stub.SENT[-1] == {
        "event": "stock.low",
        "target": "owner@example.com",
        "subject": "Low",
        "text": "t",
    }


def test_slack_stub_requires_webhook(monkeypatch):
    monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)
    with pytest.raises(RuntimeError):
        slack_stub.send("stock.low", {"text": "t"}, None)
