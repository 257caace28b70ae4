"""HTTP route exposing the tenant context of the current request."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from shared_kernel.tenant_scoping import TenantContext
from tenancy.dependencies.tenant_context import (
    get_tenant_directory,
    require_tenant_context,
)
from tenancy.domain.value_objects import TenantId
from tenancy.ports.repositories import ITenantDirectory
from tenancy.presentation.context.models import TenantContextResponse

router = APIRouter(tags=["context"])


@router.get("/context")
async def get_current_tenant(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
    directory: Annotated[ITenantDirectory, Depends(get_tenant_directory)],
) -> TenantContextResponse:
    """Return the tenant this request was admitted for."""
    tenant = await directory.get_by_id(TenantId(value=context.tenant_id))
    if tenant is None:
        # Deleted between admission and this lookup
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    return TenantContextResponse.from_context(context, tenant)
