"""HTTP routes for the organization hierarchy.

Every route runs inside the tenant context of the request: the router
depends on require_tenant_context, so unresolvable or inaccessible tenants
are rejected before any handler runs.
"""

from __future__ import annotations

from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Query, status

from organizations.application.services import OrganizationService
from organizations.dependencies.organization import get_organization_service
from organizations.domain.exceptions import (
    CrossTenantHierarchyError,
    OrganizationNotFoundError,
)
from organizations.domain.organization import Organization
from organizations.domain.value_objects import OrganizationId, OrganizationStatus
from organizations.ports.exceptions import (
    DuplicateOrganizationCodeError,
    ParentOrganizationNotFoundError,
)
from organizations.presentation.models import (
    CreateOrganizationRequest,
    OrganizationResponse,
    RenameOrganizationRequest,
    UpdateOrganizationSettingsRequest,
)
from tenancy.dependencies.tenant_context import require_tenant_context

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
    dependencies=[Depends(require_tenant_context)],
)

Service = Annotated[OrganizationService, Depends(get_organization_service)]


def _parse_organization_id(organization_id: str) -> OrganizationId:
    try:
        return OrganizationId.from_string(organization_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid organization ID format: {e}",
        ) from e


async def _one(call: Callable[[], Awaitable[Organization]]) -> OrganizationResponse:
    try:
        organization = await call()
    except OrganizationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Organization {e.organization_id} not found",
        ) from e
    return OrganizationResponse.from_domain(organization)


async def _many(
    call: Callable[[], Awaitable[list[Organization]]],
) -> list[OrganizationResponse]:
    try:
        organizations = await call()
    except OrganizationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Organization {e.organization_id} not found",
        ) from e
    return [OrganizationResponse.from_domain(o) for o in organizations]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: CreateOrganizationRequest,
    service: Service,
) -> OrganizationResponse:
    """Create an organization for the current tenant.

    Raises:
        HTTPException: 400 if parent ID is invalid
        HTTPException: 404 if the parent is not visible to the tenant
        HTTPException: 409 if the code is already used in the tenant
    """
    parent_id = (
        _parse_organization_id(request.parent_id) if request.parent_id else None
    )
    try:
        organization = await service.create_organization(
            name=request.name, code=request.code, parent_id=parent_id
        )
    except (ParentOrganizationNotFoundError, CrossTenantHierarchyError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Parent organization {request.parent_id} not found",
        ) from e
    except DuplicateOrganizationCodeError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"An organization with code '{e.code}' already exists",
        ) from e
    return OrganizationResponse.from_domain(organization)


@router.get("")
async def list_organizations(
    service: Service,
    status_filter: Annotated[OrganizationStatus | None, Query(alias="status")] = None,
) -> list[OrganizationResponse]:
    """List the tenant's organizations in hierarchy (path) order."""
    return await _many(lambda: service.list_organizations(status=status_filter))


@router.get("/{organization_id}")
async def get_organization(
    organization_id: str, service: Service
) -> OrganizationResponse:
    """Get an organization by ID.

    Organizations of other tenants are reported as not found.
    """
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.get_organization(org_id))


@router.patch("/{organization_id}")
async def rename_organization(
    organization_id: str,
    request: RenameOrganizationRequest,
    service: Service,
) -> OrganizationResponse:
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.rename_organization(org_id, request.name))


@router.patch("/{organization_id}/settings")
async def update_organization_settings(
    organization_id: str,
    request: UpdateOrganizationSettingsRequest,
    service: Service,
) -> OrganizationResponse:
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.update_settings(org_id, request.settings))


@router.get("/{organization_id}/children")
async def list_children(
    organization_id: str, service: Service
) -> list[OrganizationResponse]:
    org_id = _parse_organization_id(organization_id)
    return await _many(lambda: service.list_children(org_id))


@router.get("/{organization_id}/descendants")
async def list_descendants(
    organization_id: str, service: Service
) -> list[OrganizationResponse]:
    """Every organization below this one, at any depth."""
    org_id = _parse_organization_id(organization_id)
    return await _many(lambda: service.list_descendants(org_id))


@router.get("/{organization_id}/ancestors")
async def list_ancestors(
    organization_id: str, service: Service
) -> list[OrganizationResponse]:
    """The chain of organizations above this one, root first."""
    org_id = _parse_organization_id(organization_id)
    return await _many(lambda: service.list_ancestors(org_id))


@router.post("/{organization_id}/activate")
async def activate_organization(
    organization_id: str, service: Service
) -> OrganizationResponse:
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.activate_organization(org_id))


@router.post("/{organization_id}/deactivate")
async def deactivate_organization(
    organization_id: str, service: Service
) -> OrganizationResponse:
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.deactivate_organization(org_id))


@router.post("/{organization_id}/archive")
async def archive_organization(
    organization_id: str, service: Service
) -> OrganizationResponse:
    org_id = _parse_organization_id(organization_id)
    return await _one(lambda: service.archive_organization(org_id))
