"""Exceptions raised by tenant scoping.

None of these are business outcomes. ``TenantScopeViolation`` is mapped to
"not found" at the HTTP boundary so a caller can never learn that a row
exists under another tenant.
"""

from __future__ import annotations


class TenantScopingError(Exception):
    """Base exception for tenant scoping failures."""


class MissingTenantContextError(TenantScopingError):
    """Raised when a tenant-scoped operation runs with no tenant context."""

    def __init__(self, operation: str, entity: str | None = None):
        self.operation = operation
        self.entity = entity
        target = f" on {entity}" if entity else ""
        super().__init__(
            f"No tenant context is established for {operation}{target}"
        )


class TenantScopeViolation(TenantScopingError):
    """Raised when an operation targets a row outside the current tenant."""

    def __init__(
        self,
        entity: str,
        expected_tenant_id: str,
        actual_tenant_id: str | None,
    ):
        self.entity = entity
        self.expected_tenant_id = expected_tenant_id
        self.actual_tenant_id = actual_tenant_id
        super().__init__(
            f"{entity} belongs to tenant {actual_tenant_id!r}, "
            f"not the current tenant {expected_tenant_id!r}"
        )


class TenantContextAlreadyEstablishedError(TenantScopingError):
    """Raised when a tenant scope is opened while another one is active."""

    def __init__(self, active_tenant_id: str, requested_tenant_id: str):
        self.active_tenant_id = active_tenant_id
        self.requested_tenant_id = requested_tenant_id
        super().__init__(
            f"Tenant context for {active_tenant_id!r} is already established; "
            f"refusing to switch to {requested_tenant_id!r}"
        )
