"""Low-stock detection with a per-ingredient cool-down."""

from __future__ import annotations

import logging
from typing import List

from redis.exceptions import RedisError

from config import get_settings

from ..domain import StockLevel
from ..repos.inventory_repo import InventoryRepo
from ..repos_sqlalchemy.tenants_repo_sql import TenantsRepoSQL
from ..routes_metrics import stock_alerts_sent_total
from .notifications import send_low_stock_digest

logger = logging.getLogger("orderflow.stock_alerts")

COOLDOWN_KEY = "stockalert:{tenant}:{ingredient}"


def needs_alert(level: StockLevel) -> bool:
    """Out of stock (``<= 0``) or at/below the ingredient's alert level."""
    return level.current_stock <= 0 or level.current_stock <= level.min_stock_alert


async def _cooling_down(redis, tenant_id: str, levels: List[StockLevel]) -> set:
    if redis is None or not levels:
        return set()
    keys = [
        COOLDOWN_KEY.format(tenant=tenant_id, ingredient=level.ingredient_id)
        for level in levels
    ]
    try:
        values = await redis.mget(keys)
    except RedisError:
        logger.warning("alert cool-down unavailable", extra={"tenant": tenant_id})
        return set()
    return {level.ingredient_id for level, value in zip(levels, values) if value}


async def _start_cooldown(redis, tenant_id: str, levels: List[StockLevel]) -> None:
    if redis is None:
        return
    ttl = get_settings().stock_alert_cooldown_secs
    try:
        pipe = redis.pipeline()
        for level in levels:
            pipe.set(
                COOLDOWN_KEY.format(tenant=tenant_id, ingredient=level.ingredient_id),
                "1",
                ex=ttl,
            )
        await pipe.execute()
    except RedisError:
        logger.warning("alert cool-down not recorded", extra={"tenant": tenant_id})


async def check_and_notify_low_stock(
    tenant_id: str,
    inventory: InventoryRepo,
    tenants: TenantsRepoSQL,
    redis=None,
) -> List[str]:
    """Send one digest for the tenant's low and out-of-stock ingredients.

    Ingredients alerted within the cool-down window are left out; the window
    starts only once a digest was actually delivered. Returns the ids of the
    ingredients included in the digest (empty when nothing was sent).
    """

    levels = [level for level in await inventory.list_stock_levels(tenant_id) if needs_alert(level)]
    if not levels:
        return []
    recent = await _cooling_down(redis, tenant_id, levels)
    pending = [level for level in levels if level.ingredient_id not in recent]
    if not pending:
        logger.info("stock alerts cooling down", extra={"tenant": tenant_id})
        return []

    tenant = await tenants.get(tenant_id)
    if tenant is None:
        return []
    recipients = list(tenant.alert_emails or [])
    if not recipients:
        logger.info("no stock alert recipients", extra={"tenant": tenant_id})
        return []

    sent = await send_low_stock_digest(tenant.name, tenant.slug, pending, recipients)
    if not sent:
        return []
    await _start_cooldown(redis, tenant_id, pending)
    stock_alerts_sent_total.inc()
    logger.info(
        "stock alert digest sent",
        extra={"tenant": tenant_id, "ingredients": len(pending)},
    )
    return [level.ingredient_id for level in pending]


__all__ = ["check_and_notify_low_stock", "needs_alert", "COOLDOWN_KEY"]
