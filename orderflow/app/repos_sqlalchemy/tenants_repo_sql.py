"""SQLAlchemy access to tenant rows, billing state and tax settings."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import TaxConfig, TenantBilling
from ..models import Tenant
from ..repos.billing_repo import BillingRepo


def tax_config_for(tenant: Tenant) -> TaxConfig:
    """Return the tenant's tax/service settings as a :class:`TaxConfig`."""
    return TaxConfig(
        enable_tax=bool(tenant.enable_tax),
        tax_rate=Decimal(str(tenant.tax_rate or 0)),
        enable_service_charge=bool(tenant.enable_service_charge),
        service_charge_rate=Decimal(str(tenant.service_charge_rate or 0)),
    )


def billing_for(tenant: Tenant) -> TenantBilling:
    return TenantBilling(
        subscription_plan=tenant.subscription_plan,
        subscription_status=tenant.subscription_status,
        trial_ends_at=tenant.trial_ends_at,
    )


class TenantsRepoSQL(BillingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, tenant_id: str) -> Tenant | None:
        return await self.session.get(Tenant, tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        return await self.session.scalar(select(Tenant).where(Tenant.slug == slug))

    async def get_tenant_billing(self, tenant_id: str) -> TenantBilling | None:
        tenant = await self.get(tenant_id)
        if tenant is None:
            return None
        return billing_for(tenant)
