"""Pydantic models for the current-tenant endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.tenant_scoping import TenantContext
from tenancy.domain.tenant import Tenant
from tenancy.presentation.tenants.models import TenantResponse


class TenantContextResponse(BaseModel):
    """The tenant admitted for the current request and how it was resolved."""

    tenant_id: str = Field(..., description="Admitted tenant ID")
    source: str = Field(..., description="Resolving signal: host, header or principal")
    tenant: TenantResponse

    @classmethod
    def from_context(
        cls, context: TenantContext, tenant: Tenant
    ) -> TenantContextResponse:
        return cls(
            tenant_id=context.tenant_id,
            source=context.source,
            tenant=TenantResponse.from_domain(tenant),
        )
