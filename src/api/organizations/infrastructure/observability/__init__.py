"""Domain probes for organizations infrastructure."""

from organizations.infrastructure.observability.repository_probe import (
    DefaultOrganizationRepositoryProbe,
    OrganizationRepositoryProbe,
)

__all__ = [
    "DefaultOrganizationRepositoryProbe",
    "OrganizationRepositoryProbe",
]
