"""Repository interface for tenant state owned by other subsystems."""

from abc import ABC, abstractmethod


class BillingRepo(ABC):
    """Contract for reading tenant billing state and settings."""

    @abstractmethod
    async def get_tenant_billing(self, tenant_id):
        """Return ``TenantBilling`` for ``tenant_id``."""
        raise NotImplementedError
