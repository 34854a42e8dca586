"""Order submission: untrusted cart in, stored and priced order out.

Steps up to the order write run in the request and either raise a
:class:`~orderflow.app.errors.PipelineError` or commit. Coupon usage is
recorded after the commit and never fails the order. Inventory work is
handed to ``schedule`` only when the tenant's plan includes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from .. import pricing
from ..domain import CartLine, CreatedOrder, OrderMetadata
from ..errors import PipelineError
from ..events import ORDER_PLACED, event_bus
from ..models import Tenant
from ..plans import can_access
from ..repos_sqlalchemy import CatalogRepoSQL, CouponRepoSQL, OrdersRepoSQL
from ..repos_sqlalchemy.tenants_repo_sql import billing_for, tax_config_for
from ..routes_metrics import orders_created_total, orders_rejected_total
from . import catalog_service, coupon_service
from .side_effects import deplete_and_alert, spawn

logger = logging.getLogger("orderflow.orders")


@dataclass
class OrderSubmission:
    lines: List[CartLine]
    metadata: OrderMetadata = field(default_factory=OrderMetadata)
    coupon_code: str | None = None


async def submit_order(
    tenant: Tenant,
    submission: OrderSubmission,
    session: AsyncSession,
    *,
    schedule: Callable[..., Any] | None = None,
    redis=None,
) -> CreatedOrder:
    """Revalidate, price and store ``submission`` for ``tenant``."""

    schedule = schedule or spawn
    # read everything needed from the tenant row before any commit or rollback
    tenant_id = tenant.id
    billing = billing_for(tenant)
    try:
        created, coupon_id = await _create(tenant, submission, session)
    except PipelineError as exc:
        orders_rejected_total.labels(code=exc.code).inc()
        logger.info(
            "order rejected: %s", exc.code, extra={"tenant": tenant_id}
        )
        raise
    orders_created_total.inc()
    logger.info(
        "order created",
        extra={"tenant": tenant_id, "order_id": created.order_id},
    )

    if coupon_id:
        await coupon_service.increment_usage(coupon_id, CouponRepoSQL(session))
    await event_bus.publish(
        ORDER_PLACED,
        {
            "tenant_id": tenant_id,
            "order_id": created.order_id,
            "order_number": created.order_number,
            "total": created.total,
        },
    )

    gate = (billing.subscription_plan, billing.subscription_status, billing.trial_ends_at)
    if can_access("inventory_tracking", *gate):
        schedule(
            deplete_and_alert,
            tenant_id,
            created.order_id,
            stock_alerts=can_access("stock_alerts", *gate),
            redis=redis,
        )
    return created


async def _create(
    tenant: Tenant, submission: OrderSubmission, session: AsyncSession
) -> tuple[CreatedOrder, str | None]:
    cart = await catalog_service.revalidate(
        tenant.id, submission.lines, CatalogRepoSQL(session)
    )
    discount = 0
    coupon_id = None
    if submission.coupon_code:
        result = await coupon_service.validate(
            submission.coupon_code,
            tenant.id,
            cart.trusted_subtotal,
            CouponRepoSQL(session),
        )
        result.raise_for_invalid()
        discount = result.discount_amount
        coupon_id = result.coupon_id
    submission.metadata.coupon_id = coupon_id

    breakdown = pricing.compute(cart.trusted_subtotal, tax_config_for(tenant), discount)
    created = await OrdersRepoSQL(session).create_order_with_items(
        tenant.id, cart.trusted_lines, breakdown, submission.metadata
    )
    return created, coupon_id


__all__ = ["OrderSubmission", "submit_order"]
