from __future__ import annotations

"""Manual trigger for the low-stock digest."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from .deps.tenant import get_tenant
from .models import Tenant
from .plans import can_access
from .services.side_effects import notify_low_stock
from .utils.responses import ok

router = APIRouter(prefix="/admin/stock-alerts")


@router.post("/check")
async def check_stock_alerts(
    request: Request,
    background_tasks: BackgroundTasks,
    tenant: Tenant = Depends(get_tenant),
) -> dict:
    if not can_access(
        "stock_alerts",
        tenant.subscription_plan,
        tenant.subscription_status,
        tenant.trial_ends_at,
    ):
        return ok({"skipped": True, "reason": "feature_not_available"})
    background_tasks.add_task(
        notify_low_stock, tenant.id, redis=getattr(request.app.state, "redis", None)
    )
    return ok({"scheduled": True})
