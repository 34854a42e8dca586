from __future__ import annotations

"""Guest-facing order submission."""

from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .db import session_dependency
from .deps.tenant import get_tenant
from .models import Tenant
from .schemas import OrderIn, OrderOut
from .services.order_pipeline import OrderSubmission, submit_order
from .utils.responses import ok

router = APIRouter(prefix="/g")


@router.post("/order")
async def create_guest_order(
    payload: OrderIn,
    request: Request,
    background_tasks: BackgroundTasks,
    tenant: Tenant = Depends(get_tenant),
    session: AsyncSession = Depends(session_dependency),
) -> dict:
    """Price and store a guest order; inventory work runs after the response."""

    submission = OrderSubmission(
        lines=[line.to_domain() for line in payload.items],
        metadata=payload.metadata(),
        coupon_code=payload.coupon_code,
    )
    created = await submit_order(
        tenant,
        submission,
        session,
        schedule=background_tasks.add_task,
        redis=getattr(request.app.state, "redis", None),
    )
    return ok(OrderOut(**asdict(created)).model_dump())
