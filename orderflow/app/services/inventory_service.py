"""Inventory depletion for confirmed orders."""

from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict

from ..domain import StockMovementRecord
from ..errors import DestockFailure
from ..models import MovementType
from ..repos.inventory_repo import InventoryRepo
from ..repos.orders_repo import OrdersRepo

logger = logging.getLogger("orderflow.inventory")


async def destock_order(
    order_id: str,
    tenant_id: str,
    inventory: InventoryRepo,
    orders: OrdersRepo,
) -> Dict[str, Decimal]:
    """Deduct the ingredients consumed by ``order_id`` from stock.

    Quantities are summed per ingredient over every line, then each
    ingredient gets one relative decrement and one ``order_destock``
    movement. All changes are committed together. Returns the amount taken
    per ingredient id; any storage error is raised as :class:`DestockFailure`
    after the unit of work is rolled back.
    """

    try:
        usage: Dict[str, Decimal] = OrderedDict()
        for item_id, quantity in await orders.get_order_lines(tenant_id, order_id):
            for line in await inventory.get_recipe(tenant_id, item_id):
                usage[line.ingredient_id] = (
                    usage.get(line.ingredient_id, Decimal("0"))
                    + line.qty_per_unit * quantity
                )
        for ingredient_id, amount in usage.items():
            await inventory.decrement_stock(tenant_id, ingredient_id, amount)
            await inventory.append_stock_movement(
                StockMovementRecord(
                    tenant_id=tenant_id,
                    ingredient_id=ingredient_id,
                    movement_type=MovementType.ORDER_DESTOCK.value,
                    quantity=-amount,
                    reference_id=order_id,
                    notes="order destock",
                )
            )
        await inventory.commit()
    except Exception as exc:
        await inventory.rollback()
        raise DestockFailure(order_id, exc) from exc
    logger.info(
        "order destocked",
        extra={"tenant": tenant_id, "order_id": order_id, "ingredients": len(usage)},
    )
    return dict(usage)
