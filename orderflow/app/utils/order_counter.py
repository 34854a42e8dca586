"""Per tenant, per day counters for human-readable order numbers."""

from datetime import date, datetime, timezone

from sqlalchemy import Date, String, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession


def format_order_number(prefix: str, day: date, current: int) -> str:
    """Return ``PREFIX-YYYYMMDD-NNN``; the counter widens past 999."""
    return f"{prefix}-{day:%Y%m%d}-{current:03d}"


async def next_order_number(
    session: AsyncSession, tenant_id: str, prefix: str, day: date | None = None
) -> str:
    """Return the next order number for ``tenant_id`` on ``day``.

    The counter row is created if missing and incremented inside the database,
    so concurrent callers never receive the same value. The increment is
    committed straight away; a number that is later abandoned leaves a gap.
    """
    day = day or datetime.now(timezone.utc).date()
    stmt = text(
        """
        INSERT INTO order_counters (tenant_id, day, current)
        VALUES (:tenant_id, :day, 1)
        ON CONFLICT (tenant_id, day)
        DO UPDATE SET current = order_counters.current + 1
        RETURNING current
        """
    ).bindparams(
        bindparam("tenant_id", type_=String),
        bindparam("day", type_=Date),
    )
    result = await session.execute(stmt, {"tenant_id": tenant_id, "day": day})
    current = result.scalar_one()
    await session.commit()
    return format_order_number(prefix, day, current)
