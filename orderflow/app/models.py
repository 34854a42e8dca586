"""Database models for the ordering platform.

All rows are scoped by ``tenant_id``. Money columns hold integral minor
currency units (cents, centimes); tax and service rates are percentages.
"""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class SubscriptionPlan(str, enum.Enum):
    ESSENTIEL = "essentiel"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, enum.Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELLED = "cancelled"
    PAUSED = "paused"


class Tenant(Base):
    """One restaurant account with its billing state and tax settings."""

    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    subscription_plan = Column(String, nullable=True)
    subscription_status = Column(String, nullable=True)
    trial_ends_at = Column(DateTime(timezone=True), nullable=True)

    enable_tax = Column(Boolean, nullable=False, default=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    enable_service_charge = Column(Boolean, nullable=False, default=False)
    service_charge_rate = Column(Numeric(5, 2), nullable=False, default=0)

    alert_emails = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class MenuItem(Base):
    """Catalog entry; ``options``/``variants``/``modifiers`` hold price deltas."""

    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    options = Column(JSON, nullable=False, default=list)
    variants = Column(JSON, nullable=False, default=list)
    modifiers = Column(JSON, nullable=False, default=list)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Coupon(Base):
    """Promotional code, unique per tenant."""

    __tablename__ = "coupons"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_coupons_tenant_code"),
        CheckConstraint(
            "discount_type != 'percentage' OR discount_value <= 100",
            name="ck_coupons_percentage_max",
        ),
        CheckConstraint("discount_value >= 0", name="ck_coupons_value_positive"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    code = Column(String(50), nullable=False)
    discount_type = Column(String, nullable=False)
    discount_value = Column(Integer, nullable=False)
    min_order_amount = Column(Integer, nullable=True)
    max_discount_amount = Column(Integer, nullable=True)
    valid_from = Column(DateTime(timezone=True), nullable=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    max_uses = Column(Integer, nullable=True)
    current_uses = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class Order(Base):
    """Order header with its server-computed pricing breakdown."""

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_orders_tenant_number"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    order_number = Column(String, nullable=False)
    status = Column(String, nullable=False)

    subtotal = Column(Integer, nullable=False)
    tax_amount = Column(Integer, nullable=False, default=0)
    service_charge_amount = Column(Integer, nullable=False, default=0)
    discount_amount = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False)
    coupon_id = Column(String(36), ForeignKey("coupons.id"), nullable=True)

    service_type = Column(String, nullable=False, default="dine_in")
    table_number = Column(String(10), nullable=True)
    room_number = Column(String(20), nullable=True)
    delivery_address = Column(Text, nullable=True)
    customer_name = Column(String(100), nullable=True)
    customer_phone = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    payment_status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("OrderItem", back_populates="order", lazy="selectin")


class OrderItem(Base):
    """Trusted line snapshot; ``unit_price`` always comes from the catalog."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(String(36), ForeignKey("menu_items.id"), nullable=False)
    name = Column(String, nullable=False)
    unit_price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    line_total = Column(Integer, nullable=False)
    notes = Column(String, nullable=True)
    customer_notes = Column(String(500), nullable=True)
    modifiers = Column(JSON, nullable=False, default=list)

    order = relationship("Order", back_populates="items")


class OrderCounter(Base):
    """Per tenant, per day counters for human-readable order numbers."""

    __tablename__ = "order_counters"
    __table_args__ = (UniqueConstraint("tenant_id", "day", name="uq_order_counters"),)

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(36), nullable=False)
    day = Column(Date, nullable=False)
    current = Column(Integer, nullable=False, default=0)


class Ingredient(Base):
    """Stocked ingredient; ``current_stock`` may go negative."""

    __tablename__ = "ingredients"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    current_stock = Column(Numeric(12, 3), nullable=False, default=0)
    min_stock_alert = Column(Numeric(12, 3), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Recipe(Base):
    """Quantity of an ingredient consumed by one unit of a menu item."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False)
    menu_item_id = Column(String(36), ForeignKey("menu_items.id"), nullable=False, index=True)
    ingredient_id = Column(String(36), ForeignKey("ingredients.id"), nullable=False)
    quantity_needed = Column(Numeric(12, 3), nullable=False)


class MovementType(str, enum.Enum):
    ORDER_DESTOCK = "order_destock"
    MANUAL_ADD = "manual_add"
    MANUAL_REMOVE = "manual_remove"
    ADJUSTMENT = "adjustment"
    OPENING = "opening"


class StockMovement(Base):
    """Audit record for every stock change."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(36), nullable=False, index=True)
    ingredient_id = Column(String(36), ForeignKey("ingredients.id"), nullable=False)
    movement_type = Column(String, nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    reference_id = Column(String(36), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


__all__ = [
    "Base",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "Tenant",
    "MenuItem",
    "DiscountType",
    "Coupon",
    "Order",
    "OrderItem",
    "OrderCounter",
    "Ingredient",
    "Recipe",
    "MovementType",
    "StockMovement",
]
