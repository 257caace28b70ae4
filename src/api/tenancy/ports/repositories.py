"""Repository protocols (ports) for the tenancy bounded context.

The TenantDirectory is the read-only lookup every other component depends
on. The tenant repository extends it with the writes used by tenant
management.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus


@runtime_checkable
class ITenantDirectory(Protocol):
    """Read-only tenant lookup.

    The tenant registry is exempt from tenant scoping: it must be queryable
    across all tenants, including by requests that have no tenant yet.
    """

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID, or None if it does not exist."""
        ...

    async def get_by_domain(self, domain: str) -> Tenant | None:
        """Retrieve a tenant by its domain (case-insensitive), or None."""
        ...


@runtime_checkable
class ITenantRepository(ITenantDirectory, Protocol):
    """Repository for Tenant aggregate persistence."""

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantDomainError: If another tenant owns the domain
        """
        ...

    async def list_all(self, status: TenantStatus | None = None) -> list[Tenant]:
        """List tenants ordered by name, optionally filtered by status."""
        ...

    async def list_lapsed_trials(self, now: datetime) -> list[Tenant]:
        """List trial tenants whose trial ended before ``now``."""
        ...
