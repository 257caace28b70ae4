"""Port-level exceptions for the tenancy bounded context."""


class DuplicateTenantDomainError(Exception):
    """Raised when a tenant domain is already owned by another tenant.

    Tenant domains are globally unique because they drive subdomain
    resolution.
    """

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Tenant domain '{domain}' already exists")
