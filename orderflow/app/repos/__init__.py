"""Storage contracts consumed by the order pipeline."""

from .billing_repo import BillingRepo
from .catalog_repo import CatalogRepo
from .coupon_repo import CouponRepo
from .inventory_repo import InventoryRepo
from .orders_repo import OrdersRepo

__all__ = ["BillingRepo", "CatalogRepo", "CouponRepo", "InventoryRepo", "OrdersRepo"]
