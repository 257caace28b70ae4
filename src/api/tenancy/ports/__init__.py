"""Ports for the tenancy bounded context."""

from tenancy.ports.exceptions import DuplicateTenantDomainError
from tenancy.ports.repositories import ITenantDirectory, ITenantRepository

__all__ = [
    "DuplicateTenantDomainError",
    "ITenantDirectory",
    "ITenantRepository",
]
