from __future__ import annotations

"""Read-only coupon preview for the cart screen."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .db import session_dependency
from .deps.tenant import get_tenant
from .models import Tenant
from .repos_sqlalchemy import CouponRepoSQL
from .schemas import CouponCheckIn
from .services import coupon_service
from .utils.responses import ok

router = APIRouter(prefix="/g/coupons")


@router.post("/validate")
async def validate_coupon(
    payload: CouponCheckIn,
    tenant: Tenant = Depends(get_tenant),
    session: AsyncSession = Depends(session_dependency),
) -> dict:
    """Report whether ``code`` applies to ``subtotal``; usage is not counted."""

    result = await coupon_service.validate(
        payload.code, tenant.id, payload.subtotal, CouponRepoSQL(session)
    )
    return ok(result.as_dict())
