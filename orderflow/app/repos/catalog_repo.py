"""Repository interface for catalog lookups."""

from abc import ABC, abstractmethod


class CatalogRepo(ABC):
    """Contract for reading authoritative menu prices."""

    @abstractmethod
    async def get_item(self, tenant_id, item_id):
        """Return a ``CatalogItem`` scoped to ``tenant_id`` or ``None``."""
        raise NotImplementedError
