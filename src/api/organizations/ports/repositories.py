"""Repository protocols (ports) for the organizations bounded context.

Implementations operate inside a tenant context: every read returns only
rows of the current tenant and every write is checked against it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from organizations.domain.organization import Organization
from organizations.domain.value_objects import OrganizationId, OrganizationStatus


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Repository for Organization aggregate persistence."""

    async def save(self, organization: Organization) -> None:
        """Insert or update an organization.

        Raises:
            DuplicateOrganizationCodeError: If the code is taken in the tenant
            TenantScopeViolation: If the organization belongs to another tenant
        """
        ...

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Retrieve an organization of the current tenant, or None."""
        ...

    async def get_by_code(self, code: str) -> Organization | None:
        """Retrieve an organization of the current tenant by code, or None."""
        ...

    async def list_all(
        self, status: OrganizationStatus | None = None
    ) -> list[Organization]:
        """List the tenant's organizations ordered by path."""
        ...

    async def list_children(self, parent: Organization) -> list[Organization]:
        """List the direct children of ``parent`` ordered by name."""
        ...

    async def list_descendants(self, ancestor: Organization) -> list[Organization]:
        """List every organization strictly below ``ancestor``, ordered by path."""
        ...

    async def list_ancestors(self, organization: Organization) -> list[Organization]:
        """List the ancestors of ``organization`` from the root down."""
        ...
