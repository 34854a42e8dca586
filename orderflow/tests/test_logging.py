import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from orderflow.app.middlewares.logging import LoggingMiddleware
from orderflow.app.middlewares.request_id import RequestIdMiddleware
from orderflow.app.obs.logging import JsonFormatter


def _make_app():
    test_app = FastAPI()
    test_app.add_middleware(RequestIdMiddleware)
    test_app.add_middleware(LoggingMiddleware)

    @test_app.get("/health")
    async def health():
        return {"ok": True}

    @test_app.post("/echo")
    async def echo(data: dict):
        return data

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return test_app


def test_request_id_propagation(monkeypatch, caplog):
    monkeypatch.setattr("orderflow.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/health", headers={"X-Request-ID": "abc"})
    assert resp.headers["X-Request-ID"] == "abc"
    data = json.loads(caplog.messages[1])
    assert data["req_id"] == "abc"
    assert data["status"] == 200


def test_request_id_generation(monkeypatch, caplog):
    monkeypatch.setattr("orderflow.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/health")
    rid = resp.headers["X-Request-ID"]
    assert rid
    assert json.loads(caplog.messages[1])["req_id"] == rid


def test_guest_details_are_redacted(monkeypatch, caplog):
    monkeypatch.setattr("orderflow.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    payload = {
        "customer_name": "Awa Diop",
        "customer_phone": "+221770000000",
        "delivery_address": "Rue 10, Dakar",
        "table_number": "T4",
        "items": [{"item_id": "a", "email": "x@example.com"}],
    }
    with caplog.at_level(logging.INFO, logger="api"):
        client.post("/echo", json=payload, headers={"X-Tenant-ID": "t-1"})
    inbound = json.loads(caplog.messages[0])
    body = inbound["body"]
    for key in ("customer_name", "customer_phone", "delivery_address"):
        assert body[key] == "***"
    assert body["items"][0]["email"] == "***"
    assert body["table_number"] == "T4"
    assert inbound["tenant"] == "t-1"


def test_unhandled_error_gets_envelope(monkeypatch, caplog):
    monkeypatch.setattr("orderflow.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app(), raise_server_exceptions=False)
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "INTERNAL"
    assert body["error_id"]
    assert "kaboom" not in resp.text


def test_2xx_sampling_can_drop_success_logs(monkeypatch, caplog):
    monkeypatch.setattr("orderflow.app.middlewares.logging.LOG_SAMPLE_2XX", 0)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        client.get("/health")
    assert caplog.messages == []


def test_json_logger_redaction():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "orderflow.orders",
        logging.INFO,
        __file__,
        0,
        "call +221770000000 or mail owner@example.com",
        (),
        None,
    )
    record.tenant = "t-1"
    record.order_id = "o-1"
    data = json.loads(formatter.format(record))
    assert "770000000" not in data["msg"]
    assert "owner@example.com" not in data["msg"]
    assert data["tenant"] == "t-1"
    assert data["order_id"] == "o-1"
    assert data["logger"] == "orderflow.orders"
