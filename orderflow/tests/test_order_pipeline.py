from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from orderflow.app import db
from orderflow.app.domain import CartLine, OrderMetadata
from orderflow.app.errors import CouponInvalid
from orderflow.app.events import ORDER_PLACED, event_bus
from orderflow.app.models import Coupon, Order, Tenant
from orderflow.app.services.order_pipeline import OrderSubmission, submit_order
from orderflow.app.services.side_effects import deplete_and_alert

from . import factories


async def _submit(tenant_id, lines, coupon_code=None):
    scheduled = []

    def schedule(func, *args, **kwargs):
        scheduled.append((func, args, kwargs))

    async with db.get_session() as session:
        tenant = await session.get(Tenant, tenant_id)
        created = await submit_order(
            tenant,
            OrderSubmission(lines=lines, metadata=OrderMetadata(), coupon_code=coupon_code),
            session,
            schedule=schedule,
        )
    return created, scheduled


@pytest.fixture
async def menu(engine):
    trial_end = datetime.now(timezone.utc) + timedelta(days=7)
    await factories.add(
        factories.tenant(id="basic", slug="basic", subscription_plan="essentiel"),
        factories.tenant(id="pro", slug="pro", subscription_plan="premium"),
        factories.tenant(
            id="trial",
            slug="trial",
            subscription_plan="essentiel",
            subscription_status="trial",
            trial_ends_at=trial_end,
        ),
        factories.menu_item("basic", id="a"),
        factories.menu_item("pro", id="p", price=5000),
        factories.menu_item("trial", id="t"),
        factories.coupon("pro", id="save10", max_discount_amount=500, max_uses=10),
        factories.coupon("pro", id="big", code="BIGORDER", discount_type="fixed",
                         discount_value=1000, min_order_amount=50000),
    )


@pytest.mark.anyio
async def test_price_comes_from_catalog(menu):
    created, _ = await _submit("basic", [CartLine("a", 2, claimed_unit_price=1)])
    assert created.total == 2560


@pytest.mark.anyio
async def test_essentiel_plan_schedules_nothing(menu):
    _, scheduled = await _submit("basic", [CartLine("a", 1)])
    assert scheduled == []


@pytest.mark.anyio
async def test_premium_schedules_destock_without_alerts(menu):
    created, scheduled = await _submit("pro", [CartLine("p", 1)])
    [(func, args, kwargs)] = scheduled
    assert func is deplete_and_alert
    assert args == ("pro", created.order_id)
    assert kwargs["stock_alerts"] is False


@pytest.mark.anyio
async def test_active_trial_gets_alerts(menu):
    _, scheduled = await _submit("trial", [CartLine("t", 1)])
    assert scheduled[0][2]["stock_alerts"] is True


@pytest.mark.anyio
async def test_coupon_applied_and_usage_recorded(menu):
    created, _ = await _submit("pro", [CartLine("p", 2)], coupon_code="save10")
    # 10000 + 18% + 10% - min(1000, 500)
    assert created.total == 10000 + 1800 + 1000 - 500
    async with db.get_session() as session:
        order = await session.get(Order, created.order_id)
        assert order.coupon_id == "save10"
        assert order.discount_amount == 500
        assert (await session.get(Coupon, "save10")).current_uses == 1


@pytest.mark.anyio
async def test_invalid_coupon_stops_the_order(menu):
    with pytest.raises(CouponInvalid) as info:
        await _submit("pro", [CartLine("p", 1)], coupon_code="BIGORDER")
    assert info.value.reason == "below-minimum"
    async with db.get_session() as session:
        assert await session.scalar(select(func.count()).select_from(Order)) == 0
        assert (await session.get(Coupon, "big")).current_uses == 0


@pytest.mark.anyio
async def test_order_placed_event(menu):
    queue = event_bus.subscribe(ORDER_PLACED)
    try:
        created, _ = await _submit("basic", [CartLine("a", 1)])
        event = queue.get_nowait()
    finally:
        event_bus.unsubscribe(ORDER_PLACED, queue)
    assert event["order_id"] == created.order_id
    assert event["order_number"] == created.order_number
