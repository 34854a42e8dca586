"""Dependency helpers for tenant resolution."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import session_dependency
from ..errors import InvalidInput, TenantNotFound, TenantUnavailable
from ..models import Tenant
from ..repos_sqlalchemy import TenantsRepoSQL


async def get_tenant(
    x_tenant_id: str | None = Header(default=None),
    x_tenant_slug: str | None = Header(default=None),
    session: AsyncSession = Depends(session_dependency),
) -> Tenant:
    """Return the active tenant named by ``X-Tenant-ID`` or ``X-Tenant-Slug``.

    Raises:
        InvalidInput: If neither header is present.
        TenantNotFound: If no tenant matches.
        TenantUnavailable: If the tenant is deactivated.
    """
    if not x_tenant_id and not x_tenant_slug:
        raise InvalidInput(
            "Missing X-Tenant-ID",
            details=[{"field": "X-Tenant-ID", "error": "missing"}],
        )
    repo = TenantsRepoSQL(session)
    if x_tenant_id:
        tenant = await repo.get(x_tenant_id)
    else:
        tenant = await repo.get_by_slug(x_tenant_slug)
    if tenant is None:
        raise TenantNotFound("Restaurant not found")
    if not tenant.is_active:
        raise TenantUnavailable("This restaurant is not taking orders right now")
    return tenant
