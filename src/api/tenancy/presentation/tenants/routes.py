"""HTTP routes for tenant management.

Tenant management runs outside any tenant context: these routes do not
depend on require_tenant_context and only touch the tenant registry.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tenancy.application.services import TenantService
from tenancy.dependencies.tenant import get_tenant_service
from tenancy.domain.exceptions import (
    InvalidTenantDomainError,
    TenantCannotBeActivatedError,
    TenantCannotBeDeactivatedError,
    TenantNotFoundError,
)
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.ports.exceptions import DuplicateTenantDomainError
from tenancy.presentation.tenants.models import (
    CreateTenantRequest,
    ExpiredTrialsResponse,
    RenameTenantRequest,
    TenantResponse,
    UpdateTenantSettingsRequest,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


def _parse_tenant_id(tenant_id: str) -> TenantId:
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e


def _not_found(e: TenantNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Tenant {e.tenant_id} not found",
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_tenant(
    request: CreateTenantRequest,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Provision a new tenant.

    The tenant starts ``pending``, or ``trial`` when ``trial_days`` is given.

    Raises:
        HTTPException: 409 if the domain is already taken
        HTTPException: 422 if the domain is not a single DNS label
    """
    try:
        tenant = await service.create_tenant(
            name=request.name,
            domain=request.domain,
            trial_days=request.trial_days,
        )
    except DuplicateTenantDomainError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A tenant with domain '{e.domain}' already exists",
        ) from e
    except InvalidTenantDomainError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return TenantResponse.from_domain(tenant)


@router.get("")
async def list_tenants(
    service: Annotated[TenantService, Depends(get_tenant_service)],
    status_filter: Annotated[TenantStatus | None, Query(alias="status")] = None,
) -> list[TenantResponse]:
    """List tenants ordered by name, optionally filtered by stored status."""
    tenants = await service.list_tenants(status=status_filter)
    return [TenantResponse.from_domain(tenant) for tenant in tenants]


@router.post("/trials/expire")
async def expire_trials(
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> ExpiredTrialsResponse:
    """Move every lapsed trial to ``expired``."""
    expired = await service.expire_lapsed_trials()
    return ExpiredTrialsResponse(
        count=len(expired),
        tenants=[TenantResponse.from_domain(tenant) for tenant in expired],
    )


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID.

    Raises:
        HTTPException: 400 if tenant ID is invalid
        HTTPException: 404 if tenant not found
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.get_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    return TenantResponse.from_domain(tenant)


@router.patch("/{tenant_id}")
async def rename_tenant(
    tenant_id: str,
    request: RenameTenantRequest,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.rename_tenant(tenant_id_obj, request.name)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    return TenantResponse.from_domain(tenant)


@router.patch("/{tenant_id}/settings")
async def update_tenant_settings(
    tenant_id: str,
    request: UpdateTenantSettingsRequest,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Shallow-merge settings into the tenant settings."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.update_settings(tenant_id_obj, request.settings)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/activate")
async def activate_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Activate a tenant. Activating an active tenant is a no-op.

    Raises:
        HTTPException: 404 if tenant not found
        HTTPException: 409 if the tenant is expired
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.activate_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    except TenantCannotBeActivatedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/deactivate")
async def deactivate_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Deactivate an active tenant.

    Raises:
        HTTPException: 404 if tenant not found
        HTTPException: 409 if the tenant is not active
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.deactivate_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    except TenantCannotBeDeactivatedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/suspend")
async def suspend_tenant(
    tenant_id: str,
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.suspend_tenant(tenant_id_obj)
    except TenantNotFoundError as e:
        raise _not_found(e) from e
    return TenantResponse.from_domain(tenant)
