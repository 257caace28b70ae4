"""Tenant context FastAPI dependency.

Every tenant-scoped route depends on :func:`require_tenant_context`. It runs
the TenantResolver over the request, admits the candidate through the
TenantAccessGuard and holds the tenant context open while the route runs:

    @router.get("/organizations")
    async def list_organizations(
        tenant: Annotated[TenantContext, Depends(require_tenant_context)],
    ):
        ...

A request without a valid, accessible tenant is answered with 404 or 403
before the route body executes.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session
from infrastructure.settings import get_tenancy_settings
from shared_kernel.tenant_scoping import TenantContext
from tenancy.application.access_guard import TenantAccessGuard
from tenancy.application.resolver import RequestSignals, TenantResolver
from tenancy.domain.exceptions import TenantInactiveError, TenantNotFoundError
from tenancy.infrastructure.tenant_repository import TenantRepository
from tenancy.ports.repositories import ITenantDirectory


def get_tenant_directory(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> ITenantDirectory:
    """TenantDirectory backed by the read session."""
    return TenantRepository(session=session)


def get_tenant_resolver(
    directory: Annotated[ITenantDirectory, Depends(get_tenant_directory)],
) -> TenantResolver:
    return TenantResolver(
        directory=directory,
        min_host_labels=get_tenancy_settings().min_host_labels,
    )


def get_tenant_access_guard(
    directory: Annotated[ITenantDirectory, Depends(get_tenant_directory)],
) -> TenantAccessGuard:
    return TenantAccessGuard(directory=directory)


def request_signals(request: Request) -> RequestSignals:
    """Extract tenant-identifying signals from a request.

    The principal is whatever an authentication middleware stored under
    ``scope["user"]``; anonymous requests simply have none.
    """
    return RequestSignals(
        host=request.headers.get("host"),
        tenant_header=request.headers.get(get_tenancy_settings().tenant_header),
        principal=request.scope.get("user"),
    )


async def require_tenant_context(
    signals: Annotated[RequestSignals, Depends(request_signals)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    guard: Annotated[TenantAccessGuard, Depends(get_tenant_access_guard)],
) -> AsyncGenerator[TenantContext, None]:
    """Resolve, admit and hold the tenant context for the current request.

    Raises:
        HTTPException: 404 if no tenant could be resolved or it does not
            exist, 403 if the tenant exists but is not accessible.
    """
    candidate = await resolver.resolve(signals)
    async with AsyncExitStack() as stack:
        try:
            context = await stack.enter_async_context(guard.establish(candidate))
        except TenantNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Tenant not found",
            ) from e
        except TenantInactiveError as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"message": "Tenant is not active", "status": e.status.value},
            ) from e
        yield context
