"""SQLAlchemy implementation of the catalog store."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import CatalogItem
from ..models import MenuItem
from ..repos.catalog_repo import CatalogRepo


class CatalogRepoSQL(CatalogRepo):
    """Read menu items through an ``AsyncSession``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_item(self, tenant_id: str, item_id: str) -> CatalogItem | None:
        """Return the live catalog entry; soft-deleted items are not found."""
        item = await self.session.scalar(
            select(MenuItem).where(
                MenuItem.id == item_id,
                MenuItem.tenant_id == tenant_id,
                MenuItem.deleted_at.is_(None),
            )
        )
        if item is None:
            return None
        return CatalogItem(
            id=item.id,
            name=item.name,
            price=int(item.price),
            available=bool(item.is_available),
            options=tuple(item.options or ()),
            variants=tuple(item.variants or ()),
            modifiers=tuple(item.modifiers or ()),
        )
