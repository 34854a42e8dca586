"""SQLAlchemy implementation of the recipe and ingredient store."""

from __future__ import annotations

from decimal import Decimal
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import RecipeLine, StockLevel, StockMovementRecord
from ..models import Ingredient, Recipe, StockMovement
from ..repos.inventory_repo import InventoryRepo
from ..utils.money import to_decimal


class InventoryRepoSQL(InventoryRepo):
    """Stock access for one unit of work.

    Decrements are issued as ``current_stock = current_stock - :amount`` so
    concurrent depletions compose in the database; nothing here reads a stock
    value and writes it back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_recipe(self, tenant_id: str, item_id: str) -> List[RecipeLine]:
        result = await self.session.execute(
            select(Recipe.ingredient_id, Recipe.quantity_needed)
            .join(Ingredient, Ingredient.id == Recipe.ingredient_id)
            .where(
                Recipe.tenant_id == tenant_id,
                Recipe.menu_item_id == item_id,
                Ingredient.is_active.is_(True),
            )
            .order_by(Recipe.id)
        )
        return [
            RecipeLine(ingredient_id=ingredient_id, qty_per_unit=to_decimal(qty))
            for ingredient_id, qty in result.all()
        ]

    async def decrement_stock(
        self, tenant_id: str, ingredient_id: str, amount: Decimal
    ) -> int:
        """Subtract ``amount`` from the stored stock; return rows touched."""
        stmt = (
            update(Ingredient)
            .where(Ingredient.id == ingredient_id, Ingredient.tenant_id == tenant_id)
            .values(
                current_stock=Ingredient.current_stock - amount,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def append_stock_movement(self, record: StockMovementRecord) -> None:
        self.session.add(
            StockMovement(
                tenant_id=record.tenant_id,
                ingredient_id=record.ingredient_id,
                movement_type=record.movement_type,
                quantity=record.quantity,
                reference_id=record.reference_id,
                notes=record.notes,
            )
        )

    async def list_stock_levels(self, tenant_id: str) -> List[StockLevel]:
        result = await self.session.execute(
            select(Ingredient)
            .where(Ingredient.tenant_id == tenant_id, Ingredient.is_active.is_(True))
            .order_by(Ingredient.name)
            .execution_options(populate_existing=True)
        )
        return [
            StockLevel(
                ingredient_id=row.id,
                name=row.name,
                unit=row.unit,
                current_stock=to_decimal(row.current_stock),
                min_stock_alert=to_decimal(row.min_stock_alert),
            )
            for row in result.scalars()
        ]

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
