"""Value objects passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class Selection:
    """Option, variant or modifier picked by the guest.

    Only ``id``/``name`` are used to find the catalog entry; a claimed price is
    kept for display and never read by pricing.
    """

    id: str | None = None
    name: str | None = None
    claimed_price: float | None = None


@dataclass(frozen=True)
class CartLine:
    """Client-submitted, untrusted order line."""

    catalog_item_id: str
    quantity: Any
    claimed_name: str | None = None
    claimed_unit_price: float | None = None
    selected_option: Selection | None = None
    selected_variant: Selection | None = None
    modifiers: tuple[Selection, ...] = ()
    customer_notes: str | None = None


@dataclass(frozen=True)
class CatalogItem:
    """Authoritative catalog row as returned by the catalog store."""

    id: str
    name: str
    price: int
    available: bool = True
    options: tuple[dict, ...] = ()
    variants: tuple[dict, ...] = ()
    modifiers: tuple[dict, ...] = ()


@dataclass(frozen=True)
class TrustedLine:
    """Server-priced line; ``unit_price`` always comes from the catalog."""

    catalog_item_id: str
    name: str
    unit_price: int
    quantity: int
    line_total: int
    notes: str | None = None
    customer_notes: str | None = None
    modifiers: tuple[dict, ...] = ()


@dataclass(frozen=True)
class RevalidatedCart:
    trusted_lines: tuple[TrustedLine, ...]
    trusted_subtotal: int


@dataclass(frozen=True)
class TaxConfig:
    enable_tax: bool = False
    tax_rate: Decimal = Decimal("0")
    enable_service_charge: bool = False
    service_charge_rate: Decimal = Decimal("0")


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: int
    tax_amount: int
    service_charge_amount: int
    discount_amount: int
    total: int

    def as_dict(self) -> dict[str, int]:
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "service_charge_amount": self.service_charge_amount,
            "discount_amount": self.discount_amount,
            "total": self.total,
        }


@dataclass(frozen=True)
class TenantBilling:
    subscription_plan: str | None
    subscription_status: str | None
    trial_ends_at: datetime | None


@dataclass
class OrderMetadata:
    """Non-priced fields copied onto the order header."""

    service_type: str = "dine_in"
    table_number: str | None = None
    room_number: str | None = None
    delivery_address: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    notes: str | None = None
    coupon_id: str | None = None


@dataclass(frozen=True)
class CreatedOrder:
    order_id: str
    order_number: str
    total: int


@dataclass(frozen=True)
class StockLevel:
    ingredient_id: str
    name: str
    unit: str
    current_stock: Decimal
    min_stock_alert: Decimal

    @property
    def is_out(self) -> bool:
        return self.current_stock <= 0


@dataclass(frozen=True)
class RecipeLine:
    ingredient_id: str
    qty_per_unit: Decimal


@dataclass
class StockMovementRecord:
    tenant_id: str
    ingredient_id: str
    movement_type: str
    quantity: Decimal
    reference_id: str | None = None
    notes: str | None = None
