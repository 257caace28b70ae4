"""Ports for the organizations bounded context."""

from organizations.ports.exceptions import (
    DuplicateOrganizationCodeError,
    ParentOrganizationNotFoundError,
)
from organizations.ports.repositories import IOrganizationRepository

__all__ = [
    "DuplicateOrganizationCodeError",
    "IOrganizationRepository",
    "ParentOrganizationNotFoundError",
]
