"""Domain probes for the organizations application layer."""

from organizations.application.observability.organization_service_probe import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)

__all__ = [
    "DefaultOrganizationServiceProbe",
    "OrganizationServiceProbe",
]
