"""Domain exceptions for the organizations bounded context."""

from __future__ import annotations


class OrganizationNotFoundError(Exception):
    """Raised when an organization is not visible to the current tenant.

    A row owned by another tenant raises this too: callers must not be able
    to tell it apart from a missing row.
    """

    def __init__(self, organization_id: str):
        self.organization_id = organization_id
        super().__init__(f"Organization {organization_id} not found")


class CrossTenantHierarchyError(Exception):
    """Raised when a child would be attached to another tenant's organization."""

    def __init__(self, parent_id: str, parent_tenant_id: str, tenant_id: str):
        self.parent_id = parent_id
        self.parent_tenant_id = parent_tenant_id
        self.tenant_id = tenant_id
        super().__init__(
            f"Organization {parent_id} belongs to tenant {parent_tenant_id} "
            f"and cannot parent an organization of tenant {tenant_id}"
        )


class InvalidOrganizationPathError(ValueError):
    """Raised when a materialized path or one of its segments is malformed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid organization path {path!r}: {reason}")
