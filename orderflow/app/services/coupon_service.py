"""Coupon validation and usage accounting.

:func:`validate` is read-only and can be called for a cart preview as well as
during order submission. :func:`increment_usage` runs only after the order is
stored and never fails the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from ..errors import CouponInvalid
from ..models import DiscountType
from ..obs import capture_exception
from ..plans import as_utc
from ..repos.coupon_repo import CouponRepo
from ..routes_metrics import coupon_redemptions_total
from ..utils.money import percent_of

logger = logging.getLogger("orderflow.coupons")

MESSAGES = {
    "not-found": "Invalid promo code",
    "inactive": "This promo code is no longer active",
    "not-yet-valid": "This promo code is not valid yet",
    "expired": "This promo code has expired",
    "usage-exhausted": "This promo code has reached its usage limit",
    "below-minimum": "Minimum order of {min_order_amount} required",
}


@dataclass(frozen=True)
class CouponValidationResult:
    valid: bool
    discount_amount: int = 0
    coupon_id: str | None = None
    reason: str | None = None
    error: str | None = None

    @classmethod
    def rejected(cls, reason: str, **fmt: Any) -> "CouponValidationResult":
        return cls(valid=False, reason=reason, error=MESSAGES[reason].format(**fmt))

    def raise_for_invalid(self) -> None:
        """Raise :class:`CouponInvalid` unless the coupon was accepted."""
        if not self.valid:
            raise CouponInvalid(self.reason or "not-found", self.error or "")

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "valid": self.valid,
            "discount_amount": self.discount_amount,
        }
        if self.coupon_id:
            data["coupon_id"] = self.coupon_id
        if not self.valid:
            data["reason"] = self.reason
            data["error"] = self.error
        return data


def normalize_code(code: str) -> str:
    """Return ``code`` trimmed and upper-cased, as stored."""
    return code.strip().upper()


def compute_discount(
    discount_type: str,
    discount_value: int,
    subtotal: int,
    max_discount_amount: int | None = None,
) -> int:
    """Return the discount for ``subtotal``, always within ``[0, subtotal]``.

    >>> compute_discount("percentage", 10, 10000, max_discount_amount=500)
    500
    >>> compute_discount("fixed", 5000, 3000)
    3000
    """

    if discount_type == DiscountType.FIXED.value:
        discount = int(discount_value)
    else:
        discount = percent_of(subtotal, discount_value)
        if max_discount_amount is not None:
            discount = min(discount, int(max_discount_amount))
    return max(0, min(discount, subtotal))


async def validate(
    code: str,
    tenant_id: str,
    trusted_subtotal: int,
    repo: CouponRepo,
    now: datetime | None = None,
) -> CouponValidationResult:
    """Check ``code`` against the tenant's coupons for ``trusted_subtotal``.

    Rules are applied in order and the first failure wins: unknown code,
    inactive, validity window, usage limit, minimum order amount.
    """

    coupon = await repo.get_by_code(tenant_id, normalize_code(code))
    if coupon is None:
        return CouponValidationResult.rejected("not-found")
    if not coupon.is_active:
        return CouponValidationResult.rejected("inactive")

    now = as_utc(now) or datetime.now(timezone.utc)
    if coupon.valid_from is not None and as_utc(coupon.valid_from) > now:
        return CouponValidationResult.rejected("not-yet-valid")
    if coupon.valid_until is not None and as_utc(coupon.valid_until) < now:
        return CouponValidationResult.rejected("expired")
    if coupon.max_uses is not None and coupon.current_uses >= coupon.max_uses:
        return CouponValidationResult.rejected("usage-exhausted")
    if coupon.min_order_amount and trusted_subtotal < coupon.min_order_amount:
        return CouponValidationResult.rejected(
            "below-minimum", min_order_amount=coupon.min_order_amount
        )

    discount = compute_discount(
        coupon.discount_type,
        coupon.discount_value,
        trusted_subtotal,
        coupon.max_discount_amount,
    )
    return CouponValidationResult(
        valid=True, discount_amount=discount, coupon_id=coupon.id
    )


async def increment_usage(coupon_id: str, repo: CouponRepo) -> bool:
    """Record one use of ``coupon_id``; failures are logged, never raised."""

    try:
        recorded = await repo.increment_usage(coupon_id)
    except Exception as exc:
        logger.error("coupon usage increment failed", extra={"coupon_id": coupon_id})
        capture_exception(exc)
        return False
    if not recorded:
        logger.warning(
            "coupon redeemed past its usage limit", extra={"coupon_id": coupon_id}
        )
        return False
    coupon_redemptions_total.inc()
    return True


__all__ = [
    "CouponValidationResult",
    "normalize_code",
    "compute_discount",
    "validate",
    "increment_usage",
]
