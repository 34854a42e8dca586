"""Repository interface for recipes and ingredient stock."""

from abc import ABC, abstractmethod


class InventoryRepo(ABC):
    """Contract for stock depletion and stock level reads."""

    @abstractmethod
    async def get_recipe(self, tenant_id, item_id):
        """Return ``RecipeLine`` entries for one unit of ``item_id``."""
        raise NotImplementedError

    @abstractmethod
    async def decrement_stock(self, tenant_id, ingredient_id, amount):
        """Subtract ``amount`` relative to the stored value."""
        raise NotImplementedError

    @abstractmethod
    async def append_stock_movement(self, record):
        """Store a ``StockMovementRecord`` audit row."""
        raise NotImplementedError

    @abstractmethod
    async def list_stock_levels(self, tenant_id):
        """Return ``StockLevel`` rows for the tenant's active ingredients."""
        raise NotImplementedError

    @abstractmethod
    async def commit(self):
        """Make pending stock changes durable."""
        raise NotImplementedError

    @abstractmethod
    async def rollback(self):
        """Discard pending stock changes."""
        raise NotImplementedError
