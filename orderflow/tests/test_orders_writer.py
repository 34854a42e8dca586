from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from orderflow.app import db
from orderflow.app.domain import OrderMetadata, PricingBreakdown, TrustedLine
from orderflow.app.errors import OrderPersistenceError
from orderflow.app.models import Order, OrderItem
from orderflow.app.repos_sqlalchemy import OrdersRepoSQL

from . import factories

PRICING = PricingBreakdown(
    subtotal=2000, tax_amount=360, service_charge_amount=200, discount_amount=0, total=2560
)


def _line(item_id="i-1", qty=2):
    return TrustedLine(item_id, "Burger", 1000, qty, 1000 * qty)


def _today():
    return datetime.now(timezone.utc).strftime("%Y%m%d")


async def _create(tenant_id="t-1", lines=None, metadata=None):
    async with db.get_session() as session:
        return await OrdersRepoSQL(session).create_order_with_items(
            tenant_id, lines or [_line()], PRICING, metadata or OrderMetadata()
        )


@pytest.fixture
async def tenants(engine):
    await factories.add(
        factories.tenant(id="t-1"),
        factories.tenant(id="t-2", slug="other"),
        factories.menu_item("t-1", id="i-1"),
    )


@pytest.mark.anyio
async def test_numbers_are_sequential_per_tenant_and_day(tenants):
    first = await _create()
    second = await _create()
    other = await _create("t-2")
    assert first.order_number == f"CMD-{_today()}-001"
    assert second.order_number == f"CMD-{_today()}-002"
    assert other.order_number == f"CMD-{_today()}-001"
    assert first.total == 2560


@pytest.mark.anyio
async def test_header_and_items_are_stored(tenants):
    created = await _create(metadata=OrderMetadata(table_number="12", notes="no onions"))
    async with db.get_session() as session:
        order = await session.get(Order, created.order_id)
        assert order.status == "pending"
        assert order.table_number == "12"
        assert (order.subtotal, order.tax_amount, order.total) == (2000, 360, 2560)
        assert [(i.menu_item_id, i.quantity, i.unit_price) for i in order.items] == [
            ("i-1", 2, 1000)
        ]


@pytest.mark.anyio
async def test_number_collision_moves_to_next_number(tenants):
    await factories.add(
        Order(
            tenant_id="t-1",
            order_number=f"CMD-{_today()}-001",
            status="pending",
            subtotal=1,
            total=1,
        )
    )
    created = await _create()
    assert created.order_number == f"CMD-{_today()}-002"


@pytest.mark.anyio
async def test_failed_line_write_leaves_no_order(tenants):
    broken = TrustedLine(None, "Ghost", 1000, 1, 1000)
    with pytest.raises(OrderPersistenceError):
        await _create(lines=[_line(), broken])
    async with db.get_session() as session:
        assert await session.scalar(select(func.count()).select_from(Order)) == 0
        assert await session.scalar(select(func.count()).select_from(OrderItem)) == 0
