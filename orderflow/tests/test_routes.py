import asyncio
import logging
from decimal import Decimal

import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from config import get_settings

from orderflow.app import db
from orderflow.app.main import create_app
from orderflow.app.models import Ingredient, Order, StockMovement
from orderflow.app.repos_sqlalchemy import InventoryRepoSQL

from . import factories

HEADERS = {"X-Tenant-ID": "t-1"}


def _client(redis=None):
    app = create_app()
    app.state.redis = redis
    return TestClient(app)


def _seed(plan="enterprise", **tenant_kw):
    factories.seed(
        factories.tenant(id="t-1", subscription_plan=plan, **tenant_kw),
        factories.menu_item("t-1", id="a", price=1000),
        factories.ingredient("t-1", id="rice", current_stock=Decimal("5")),
        factories.recipe("t-1", "a", "rice", 3),
        factories.coupon("t-1", code="BIGORDER", discount_type="fixed",
                         discount_value=500, min_order_amount=5000),
    )


def _query(stmt):
    async def run():
        async with db.get_session() as session:
            return await session.scalar(stmt)

    return asyncio.run(run())


def _order_body(**kw):
    body = {"items": [{"item_id": "a", "name": "A", "price": 1, "quantity": 2}]}
    body.update(kw)
    return body


def test_claimed_price_is_ignored(engine):
    _seed()
    resp = _client().post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 2560
    assert data["order_number"].startswith("CMD-")
    assert _query(select(Order.total).where(Order.id == data["order_id"])) == 2560


def test_fractional_claimed_price_is_ignored(engine):
    _seed()
    body = {"items": [{"item_id": "a", "name": "A", "price": 9.99, "quantity": 2}]}
    resp = _client().post("/g/order", json=body, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json()["data"]["total"] == 2560

def test_slug_header_resolves_tenant(engine):
    _seed()
    resp = _client().post("/g/order", json=_order_body(), headers={"X-Tenant-Slug": "chez-awa"})
    assert resp.status_code == 200


def test_destock_runs_after_response(engine):
    _seed(plan="premium")
    resp = _client().post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 200
    stock = _query(select(Ingredient.current_stock).where(Ingredient.id == "rice"))
    assert Decimal(str(stock)) == Decimal("-1")
    assert _query(select(func.count()).select_from(StockMovement)) == 1


def test_essentiel_plan_writes_no_stock_movement(engine):
    _seed(plan="essentiel")
    resp = _client().post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 200
    assert _query(select(func.count()).select_from(StockMovement)) == 0


def test_destock_failure_does_not_touch_order(engine, monkeypatch, caplog):
    _seed(plan="premium")

    async def boom(*args, **kwargs):
        raise RuntimeError("inventory offline")

    monkeypatch.setattr(InventoryRepoSQL, "decrement_stock", boom)
    with caplog.at_level(logging.ERROR, logger="orderflow.side_effects"):
        resp = _client().post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 200
    order_id = resp.json()["data"]["order_id"]
    assert _query(select(Order.total).where(Order.id == order_id)) == 2560
    assert _query(select(Order.status).where(Order.id == order_id)) == "pending"
    assert "destock failed" in caplog.text


def test_invalid_coupon_is_rejected_with_reason(engine):
    _seed()
    resp = _client().post("/g/order", json=_order_body(coupon_code="bigorder"), headers=HEADERS)
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "COUPON_INVALID"
    assert error["details"] == {"reason": "below-minimum"}
    assert _query(select(func.count()).select_from(Order)) == 0
    # the same cart goes through without the coupon
    assert _client().post("/g/order", json=_order_body(), headers=HEADERS).status_code == 200


def test_bad_quantity_has_field_detail(engine):
    _seed()
    body = {"items": [{"item_id": "a", "quantity": 0}]}
    resp = _client().post("/g/order", json=body, headers=HEADERS)
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "INVALID_INPUT"
    assert error["details"][0]["field"] == "items[0].quantity"


def test_malformed_payload_uses_envelope(engine):
    _seed()
    resp = _client().post("/g/order", json=_order_body(service_type="drone"), headers=HEADERS)
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "INVALID_INPUT"
    assert body["error"]["details"][0]["field"] == "service_type"


def test_unknown_item(engine):
    _seed()
    body = {"items": [{"item_id": "nope", "quantity": 1}]}
    resp = _client().post("/g/order", json=body, headers=HEADERS)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "ITEM_NOT_FOUND"


@pytest.mark.parametrize(
    "headers, status, code",
    [
        ({}, 400, "INVALID_INPUT"),
        ({"X-Tenant-ID": "ghost"}, 404, "TENANT_NOT_FOUND"),
    ],
)
def test_tenant_resolution_errors(engine, headers, status, code):
    _seed()
    resp = _client().post("/g/order", json=_order_body(), headers=headers)
    assert resp.status_code == status
    assert resp.json()["error"]["code"] == code


def test_inactive_tenant(engine):
    _seed(is_active=False)
    resp = _client().post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "TENANT_UNAVAILABLE"


def test_rate_limit_short_circuits(engine, monkeypatch):
    _seed()
    monkeypatch.setenv("ORDER_RATE_LIMIT", "2/1m")
    get_settings.cache_clear()
    client = _client(fakeredis.aioredis.FakeRedis())
    for _ in range(2):
        assert client.post("/g/order", json=_order_body(), headers=HEADERS).status_code == 200
    resp = client.post("/g/order", json=_order_body(), headers=HEADERS)
    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == "RATE_LIMIT"
    assert 0 < int(resp.headers["Retry-After"]) <= 60
    assert _query(select(func.count()).select_from(Order)) == 2
    # another tenant on the same address has its own window
    other = client.post("/g/order", json=_order_body(), headers={"X-Tenant-ID": "t-2"})
    assert other.status_code == 404


def test_no_redis_means_no_limit(engine, monkeypatch):
    _seed()
    monkeypatch.setenv("ORDER_RATE_LIMIT", "1/1m")
    get_settings.cache_clear()
    client = _client()
    for _ in range(3):
        assert client.post("/g/order", json=_order_body(), headers=HEADERS).status_code == 200


def test_coupon_preview_does_not_count_usage(engine):
    _seed()
    client = _client()
    resp = client.post(
        "/g/coupons/validate", json={"code": "bigorder", "subtotal": 6000}, headers=HEADERS
    )
    assert resp.json()["data"]["valid"] is True
    assert resp.json()["data"]["discount_amount"] == 500
    resp = client.post(
        "/g/coupons/validate", json={"code": "bigorder", "subtotal": 100}, headers=HEADERS
    )
    assert resp.json()["data"]["reason"] == "below-minimum"


def test_stock_alert_trigger_is_plan_gated(engine):
    _seed(plan="premium")
    resp = _client().post("/admin/stock-alerts/check", headers=HEADERS)
    assert resp.json()["data"] == {"skipped": True, "reason": "feature_not_available"}


def test_stock_alert_trigger_sends_digest(engine):
    from orderflow.app.providers import email_stub

    _seed(plan="enterprise")
    factories.seed(factories.ingredient("t-1", id="oil", name="Oil", current_stock=Decimal("0")))
    resp = _client().post("/admin/stock-alerts/check", headers=HEADERS)
    assert resp.json()["data"] == {"scheduled": True}
    assert len(email_stub.SENT) == 1


def test_metrics_and_health(engine):
    _seed()
    client = _client()
    client.post("/g/order", json=_order_body(), headers=HEADERS)
    assert client.get("/health").json() == {"ok": True}
    text = client.get("/metrics").text
    assert "orders_created_total" in text
    assert "orders_rejected_total" in text
