"""SQLAlchemy implementation of the coupon store."""

from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Coupon
from ..repos.coupon_repo import CouponRepo


class CouponRepoSQL(CouponRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_code(self, tenant_id: str, code: str) -> Coupon | None:
        return await self.session.scalar(
            select(Coupon).where(Coupon.tenant_id == tenant_id, Coupon.code == code)
        )

    async def increment_usage(self, coupon_id: str) -> bool:
        """Add one use inside the database, never past ``max_uses``."""
        stmt = (
            update(Coupon)
            .where(Coupon.id == coupon_id)
            .where(
                or_(Coupon.max_uses.is_(None), Coupon.current_uses < Coupon.max_uses)
            )
            .values(current_uses=Coupon.current_uses + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1
