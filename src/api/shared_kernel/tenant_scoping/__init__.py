"""Tenant scoping for the shared kernel.

Request-scoped tenant context plus the ScopeEnforcer that applies it to
every tenant-scoped model.
"""

from shared_kernel.tenant_scoping.context import (
    TenantContext,
    TenantSource,
    current_tenant,
    current_tenant_id,
    require_tenant_id,
    tenant_scope,
)
from shared_kernel.tenant_scoping.enforcer import (
    ScopeEnforcer,
    TenantScopedSession,
    registered_models,
    scope_column,
    tenant_scoped,
    with_tenant_scope,
)
from shared_kernel.tenant_scoping.exceptions import (
    MissingTenantContextError,
    TenantContextAlreadyEstablishedError,
    TenantScopeViolation,
    TenantScopingError,
)

__all__ = [
    "MissingTenantContextError",
    "ScopeEnforcer",
    "TenantContext",
    "TenantContextAlreadyEstablishedError",
    "TenantScopeViolation",
    "TenantScopedSession",
    "TenantScopingError",
    "TenantSource",
    "current_tenant",
    "current_tenant_id",
    "registered_models",
    "require_tenant_id",
    "scope_column",
    "tenant_scope",
    "tenant_scoped",
    "with_tenant_scope",
]
