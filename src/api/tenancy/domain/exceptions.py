"""Domain exceptions for the tenancy bounded context.

Each exception carries the offending identifiers so the presentation layer
can build a response without parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tenancy.domain.value_objects import TenantStatus


class TenantNotFoundError(Exception):
    """Raised when no tenant could be resolved or the tenant does not exist.

    ``tenant_id`` is None when the request carried no identifying signal.
    """

    def __init__(self, tenant_id: str | None = None):
        self.tenant_id = tenant_id
        if tenant_id is None:
            super().__init__("Tenant not found: no tenant could be resolved")
        else:
            super().__init__(f"Tenant not found: {tenant_id}")


class TenantInactiveError(Exception):
    """Raised when a tenant exists but its status does not allow access."""

    def __init__(self, tenant_id: str, status: TenantStatus):
        self.tenant_id = tenant_id
        self.status = status
        super().__init__(f"Tenant {tenant_id} is not active (status: {status})")


class TenantCannotBeActivatedError(Exception):
    """Raised when activation is attempted from a status that forbids it."""

    def __init__(self, tenant_id: str, status: TenantStatus):
        self.tenant_id = tenant_id
        self.status = status
        super().__init__(f"Tenant {tenant_id} cannot be activated from {status}")


class TenantCannotBeDeactivatedError(Exception):
    """Raised when deactivation is attempted on a tenant that is not active."""

    def __init__(self, tenant_id: str, status: TenantStatus):
        self.tenant_id = tenant_id
        self.status = status
        super().__init__(f"Tenant {tenant_id} cannot be deactivated from {status}")


class InvalidTenantDomainError(ValueError):
    """Raised when a tenant domain is not a single lower-case DNS label."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Invalid tenant domain: {domain!r}")
