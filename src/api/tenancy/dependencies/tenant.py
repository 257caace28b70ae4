"""FastAPI dependencies for tenant management."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.dependencies import get_event_dispatcher
from shared_kernel.events import DomainEventDispatcher
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.application.services import TenantService
from tenancy.infrastructure.tenant_repository import TenantRepository


def get_tenant_service_probe() -> TenantServiceProbe:
    """Get TenantServiceProbe instance."""
    return DefaultTenantServiceProbe()


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> TenantRepository:
    """Get TenantRepository bound to the request's write session."""
    return TenantRepository(session=session)


def get_tenant_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    dispatcher: Annotated[DomainEventDispatcher, Depends(get_event_dispatcher)],
    probe: Annotated[TenantServiceProbe, Depends(get_tenant_service_probe)],
) -> TenantService:
    """Get TenantService instance.

    Args:
        tenant_repo: Tenant repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        dispatcher: Domain event dispatcher
        probe: Tenant service probe for observability
    """
    return TenantService(
        tenant_repository=tenant_repo,
        session=session,
        dispatcher=dispatcher,
        probe=probe,
    )
