"""SQLAlchemy implementation of the order writer.

The header is flushed first and the line items are written only once it is
in place; header and items are committed together, so a failure on any line
leaves no order behind. Order numbers come from
:func:`..utils.order_counter.next_order_number`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..domain import CreatedOrder, OrderMetadata, OrderStatus, PricingBreakdown, TrustedLine
from ..errors import OrderPersistenceError
from ..models import Order, OrderItem
from ..repos.orders_repo import OrdersRepo
from ..utils.order_counter import next_order_number

logger = logging.getLogger("orderflow.orders")

MAX_NUMBER_ATTEMPTS = 5


class OrdersRepoSQL(OrdersRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _insert_header(
        self,
        tenant_id: str,
        pricing: PricingBreakdown,
        metadata: OrderMetadata,
    ) -> Order:
        prefix = get_settings().order_number_prefix
        day = datetime.now(timezone.utc).date()
        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            number = await next_order_number(self.session, tenant_id, prefix, day)
            order = Order(
                tenant_id=tenant_id,
                order_number=number,
                status=OrderStatus.PENDING.value,
                subtotal=pricing.subtotal,
                tax_amount=pricing.tax_amount,
                service_charge_amount=pricing.service_charge_amount,
                discount_amount=pricing.discount_amount,
                total=pricing.total,
                coupon_id=metadata.coupon_id,
                service_type=metadata.service_type,
                table_number=metadata.table_number,
                room_number=metadata.room_number,
                delivery_address=metadata.delivery_address,
                customer_name=metadata.customer_name,
                customer_phone=metadata.customer_phone,
                notes=metadata.notes,
            )
            self.session.add(order)
            try:
                await self.session.flush()
            except IntegrityError:
                await self.session.rollback()
                logger.warning(
                    "order number collision",
                    extra={"tenant": tenant_id, "order_number": number, "attempt": attempt},
                )
                continue
            return order
        raise OrderPersistenceError(
            "Could not allocate an order number",
            hint="Retry the order",
        )

    async def create_order_with_items(
        self,
        tenant_id: str,
        lines: Iterable[TrustedLine],
        pricing: PricingBreakdown,
        metadata: OrderMetadata,
    ) -> CreatedOrder:
        """Persist header and lines as one unit and return the created order."""
        try:
            order = await self._insert_header(tenant_id, pricing, metadata)
            for line in lines:
                self.session.add(
                    OrderItem(
                        order_id=order.id,
                        menu_item_id=line.catalog_item_id,
                        name=line.name,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        line_total=line.line_total,
                        notes=line.notes,
                        customer_notes=line.customer_notes,
                        modifiers=list(line.modifiers),
                    )
                )
            await self.session.flush()
            await self.session.commit()
        except OrderPersistenceError:
            raise
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("order write failed", extra={"tenant": tenant_id})
            raise OrderPersistenceError(
                "Order could not be saved", hint="Retry the order"
            ) from exc
        return CreatedOrder(
            order_id=order.id, order_number=order.order_number, total=order.total
        )

    async def get_order_lines(
        self, tenant_id: str, order_id: str
    ) -> List[Tuple[str, int]]:
        result = await self.session.execute(
            select(OrderItem.menu_item_id, OrderItem.quantity)
            .join(Order, Order.id == OrderItem.order_id)
            .where(Order.id == order_id, Order.tenant_id == tenant_id)
            .order_by(OrderItem.id)
        )
        return [(item_id, int(qty)) for item_id, qty in result.all()]

