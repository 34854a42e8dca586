"""Error taxonomy for the order pipeline.

Everything raised before the order is written is a :class:`PipelineError`
and is rendered to the guest through the error envelope. Failures in the
post-commit side effects (:class:`DestockFailure`,
:class:`NotificationFailure`) are logged by the background runner and never
reach a response.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base error carrying an envelope code and HTTP status."""

    code = "PIPELINE_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint


class RateLimited(PipelineError):
    code = "RATE_LIMIT"
    status_code = 429

    def __init__(self, retry_after: int) -> None:
        super().__init__("RateLimitExceeded", hint=f"retry in {retry_after}s")
        self.retry_after = retry_after


class InvalidInput(PipelineError):
    code = "INVALID_INPUT"
    status_code = 400


class EmptyCart(InvalidInput):
    def __init__(self) -> None:
        super().__init__("Cart is empty", details=[{"field": "items", "error": "empty"}])


class TooManyLines(InvalidInput):
    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"Maximum {limit} lines per order",
            details=[{"field": "items", "error": "too_many_lines", "count": count}],
        )


class InvalidQuantity(InvalidInput):
    def __init__(self, index: int, quantity: Any, limit: int) -> None:
        super().__init__(
            f"Quantity must be an integer between 1 and {limit}",
            details=[
                {
                    "field": f"items[{index}].quantity",
                    "error": "invalid_quantity",
                    "value": quantity,
                }
            ],
        )


class ItemNotFound(PipelineError):
    code = "ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, item_id: str) -> None:
        super().__init__(
            f"Menu item {item_id!r} not found", details={"item_id": item_id}
        )
        self.item_id = item_id


class ItemUnavailable(PipelineError):
    code = "ITEM_UNAVAILABLE"
    status_code = 409

    def __init__(self, item_id: str, name: str) -> None:
        super().__init__(
            f"{name} is no longer available", details={"item_id": item_id}
        )
        self.item_id = item_id


class TenantNotFound(PipelineError):
    code = "TENANT_NOT_FOUND"
    status_code = 404


class TenantUnavailable(PipelineError):
    code = "TENANT_UNAVAILABLE"
    status_code = 503


class CouponInvalid(PipelineError):
    """Coupon rejected; ``reason`` is one of :data:`COUPON_REASONS`."""

    code = "COUPON_INVALID"
    status_code = 422

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(
            message,
            details={"reason": reason},
            hint="Remove the coupon code to order without a discount",
        )
        self.reason = reason


COUPON_REASONS = (
    "not-found",
    "inactive",
    "not-yet-valid",
    "expired",
    "usage-exhausted",
    "below-minimum",
)


class OrderPersistenceError(PipelineError):
    code = "ORDER_PERSISTENCE"
    status_code = 500


class DestockFailure(Exception):
    """Inventory depletion failed after the order was confirmed."""

    def __init__(self, order_id: str, cause: BaseException | None = None) -> None:
        super().__init__(f"destock failed for order {order_id}")
        self.order_id = order_id
        self.__cause__ = cause


class NotificationFailure(Exception):
    """Low-stock digest could not be delivered."""


__all__ = [
    "PipelineError",
    "RateLimited",
    "InvalidInput",
    "EmptyCart",
    "TooManyLines",
    "InvalidQuantity",
    "ItemNotFound",
    "ItemUnavailable",
    "TenantNotFound",
    "TenantUnavailable",
    "CouponInvalid",
    "COUPON_REASONS",
    "OrderPersistenceError",
    "DestockFailure",
    "NotificationFailure",
]
