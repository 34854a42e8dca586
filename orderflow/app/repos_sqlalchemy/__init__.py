"""SQLAlchemy-backed repository implementations."""

from .catalog_repo_sql import CatalogRepoSQL
from .coupon_repo_sql import CouponRepoSQL
from .inventory_repo_sql import InventoryRepoSQL
from .orders_repo_sql import OrdersRepoSQL
from .tenants_repo_sql import TenantsRepoSQL

__all__ = [
    "CatalogRepoSQL",
    "CouponRepoSQL",
    "InventoryRepoSQL",
    "OrdersRepoSQL",
    "TenantsRepoSQL",
]
