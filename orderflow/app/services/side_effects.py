"""Post-commit work for confirmed orders.

Everything here runs after the order response is decided. Each step opens
its own session, logs its outcome and reports failures to the error sink;
nothing is raised back to the order caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Set

from .. import db
from ..errors import DestockFailure, NotificationFailure
from ..obs import capture_exception
from ..repos_sqlalchemy import InventoryRepoSQL, OrdersRepoSQL, TenantsRepoSQL
from ..routes_metrics import destock_runs_total
from .inventory_service import destock_order
from .stock_alerts import check_and_notify_low_stock

logger = logging.getLogger("orderflow.side_effects")

_detached: Set[asyncio.Task] = set()


def spawn(func: Callable[..., Any], *args: Any, **kwargs: Any) -> asyncio.Task:
    """Run ``func`` as a detached task that is not awaited by the caller."""
    task = asyncio.get_running_loop().create_task(func(*args, **kwargs))
    _detached.add(task)
    task.add_done_callback(_detached.discard)
    return task


async def deplete_and_alert(
    tenant_id: str, order_id: str, *, stock_alerts: bool = False, redis=None
) -> None:
    """Destock ``order_id`` and, when enabled, check for low stock."""
    extra = {"tenant": tenant_id, "order_id": order_id}
    logger.info("destock started", extra=extra)
    try:
        async with db.get_session() as session:
            inventory = InventoryRepoSQL(session)
            try:
                await destock_order(order_id, tenant_id, inventory, OrdersRepoSQL(session))
            except DestockFailure as exc:
                destock_runs_total.labels(outcome="error").inc()
                logger.error("destock failed", extra=extra, exc_info=exc)
                capture_exception(exc)
                return
            destock_runs_total.labels(outcome="ok").inc()
            if not stock_alerts:
                return
            try:
                await check_and_notify_low_stock(
                    tenant_id, inventory, TenantsRepoSQL(session), redis
                )
            except Exception as exc:
                logger.error("stock alert check failed", extra=extra, exc_info=exc)
                capture_exception(NotificationFailure(str(exc)))
    except Exception as exc:
        logger.error("order side effects failed", extra=extra, exc_info=exc)
        capture_exception(exc)


async def notify_low_stock(tenant_id: str, *, redis=None) -> None:
    """Stand-alone stock alert check, e.g. from the admin trigger."""
    try:
        async with db.get_session() as session:
            await check_and_notify_low_stock(
                tenant_id, InventoryRepoSQL(session), TenantsRepoSQL(session), redis
            )
    except Exception as exc:
        logger.error("stock alert check failed", extra={"tenant": tenant_id}, exc_info=exc)
        capture_exception(NotificationFailure(str(exc)))


__all__ = ["spawn", "deplete_and_alert", "notify_low_stock"]
