"""Domain probes for the tenancy application layer."""

from tenancy.application.observability.resolution_probe import (
    DefaultTenantAccessProbe,
    DefaultTenantResolutionProbe,
    TenantAccessProbe,
    TenantResolutionProbe,
)
from tenancy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "DefaultTenantAccessProbe",
    "DefaultTenantResolutionProbe",
    "DefaultTenantServiceProbe",
    "TenantAccessProbe",
    "TenantResolutionProbe",
    "TenantServiceProbe",
]
