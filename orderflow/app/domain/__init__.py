"""Domain models and helpers."""

from .order_status import OrderStatus
from .types import (
    CartLine,
    CatalogItem,
    CreatedOrder,
    OrderMetadata,
    PricingBreakdown,
    RecipeLine,
    RevalidatedCart,
    Selection,
    StockLevel,
    StockMovementRecord,
    TaxConfig,
    TenantBilling,
    TrustedLine,
)

__all__ = [
    "OrderStatus",
    "CartLine",
    "CatalogItem",
    "CreatedOrder",
    "OrderMetadata",
    "PricingBreakdown",
    "RecipeLine",
    "RevalidatedCart",
    "Selection",
    "StockLevel",
    "StockMovementRecord",
    "TaxConfig",
    "TenantBilling",
    "TrustedLine",
]
