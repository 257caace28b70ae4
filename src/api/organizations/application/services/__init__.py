"""Application services for the organizations bounded context."""

from organizations.application.services.organization_service import (
    OrganizationService,
)

__all__ = ["OrganizationService"]
