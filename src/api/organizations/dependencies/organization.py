"""FastAPI dependencies for the organization hierarchy."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.dependencies import get_event_dispatcher
from organizations.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from organizations.application.services import OrganizationService
from organizations.infrastructure.organization_repository import (
    OrganizationRepository,
)
from shared_kernel.events import DomainEventDispatcher


def get_organization_service_probe() -> OrganizationServiceProbe:
    return DefaultOrganizationServiceProbe()


def get_organization_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> OrganizationRepository:
    return OrganizationRepository(session=session)


def get_organization_service(
    organization_repo: Annotated[
        OrganizationRepository, Depends(get_organization_repository)
    ],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    dispatcher: Annotated[DomainEventDispatcher, Depends(get_event_dispatcher)],
    probe: Annotated[OrganizationServiceProbe, Depends(get_organization_service_probe)],
) -> OrganizationService:
    """Get OrganizationService instance.

    The service only works inside a tenant context, so routes using it must
    also depend on ``require_tenant_context``.
    """
    return OrganizationService(
        organization_repository=organization_repo,
        session=session,
        dispatcher=dispatcher,
        probe=probe,
    )
