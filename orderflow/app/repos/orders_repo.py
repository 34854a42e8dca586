"""Repository interface for order operations."""

from abc import ABC, abstractmethod


class OrdersRepo(ABC):
    """Contract for order persistence."""

    @abstractmethod
    async def create_order_with_items(self, tenant_id, lines, pricing, metadata):
        """Persist header and lines as one unit; return ``CreatedOrder``."""
        raise NotImplementedError

    @abstractmethod
    async def get_order_lines(self, tenant_id, order_id):
        """Return ``(menu_item_id, quantity)`` pairs for a stored order."""
        raise NotImplementedError
