"""Repository interface for coupons."""

from abc import ABC, abstractmethod


class CouponRepo(ABC):
    """Contract for coupon lookup and usage accounting."""

    @abstractmethod
    async def get_by_code(self, tenant_id, code):
        """Return the coupon with normalized ``code`` for ``tenant_id`` or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def increment_usage(self, coupon_id):
        """Atomically add one to the coupon's usage counter.

        Returns ``False`` when the counter was already at its limit.
        """
        raise NotImplementedError
