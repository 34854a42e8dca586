# schemas.py

"""Pydantic models for API payloads."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

from .domain import CartLine, OrderMetadata, Selection

ServiceType = Literal["dine_in", "takeaway", "delivery", "room_service"]


class SelectionIn(BaseModel):
    """Option, variant or modifier picked on the menu.

    ``price`` is what the device displayed; it is accepted but never used.
    """

    id: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=200)
    price: Optional[float] = None

    def to_domain(self) -> Selection:
        return Selection(id=self.id, name=self.name, claimed_price=self.price)


class OrderLineIn(BaseModel):
    item_id: str = Field(min_length=1)
    name: Optional[str] = None
    price: Optional[float] = None
    # validated by the catalog revalidator so errors carry the line index
    quantity: Any = None
    selected_option: Optional[SelectionIn] = None
    selected_variant: Optional[SelectionIn] = None
    modifiers: List[SelectionIn] = Field(default_factory=list)
    customer_notes: Optional[str] = Field(default=None, max_length=500)

    def to_domain(self) -> CartLine:
        return CartLine(
            catalog_item_id=self.item_id,
            quantity=self.quantity,
            claimed_name=self.name,
            claimed_unit_price=self.price,
            selected_option=self.selected_option.to_domain() if self.selected_option else None,
            selected_variant=self.selected_variant.to_domain() if self.selected_variant else None,
            modifiers=tuple(m.to_domain() for m in self.modifiers),
            customer_notes=self.customer_notes,
        )


class OrderIn(BaseModel):
    """Guest order submission."""

    items: List[OrderLineIn] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=500)
    table_number: Optional[str] = Field(default=None, max_length=10)
    customer_name: Optional[str] = Field(default=None, max_length=100)
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    service_type: ServiceType = "dine_in"
    room_number: Optional[str] = Field(default=None, max_length=20)
    delivery_address: Optional[str] = Field(default=None, max_length=500)
    coupon_code: Optional[str] = Field(default=None, max_length=50)

    def metadata(self) -> OrderMetadata:
        return OrderMetadata(
            service_type=self.service_type,
            table_number=self.table_number,
            room_number=self.room_number,
            delivery_address=self.delivery_address,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            notes=self.notes,
        )


class OrderOut(BaseModel):
    order_id: str
    order_number: str
    total: int


class CouponCheckIn(BaseModel):
    """Cart-screen coupon preview."""

    code: str = Field(min_length=1, max_length=50)
    subtotal: int = Field(ge=0)
