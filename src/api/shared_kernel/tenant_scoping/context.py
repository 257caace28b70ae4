"""Request-scoped tenant context.

The current tenant lives in a ``ContextVar``, so every asyncio task and
every thread sees only the tenant its own request established. A context
is opened with :func:`tenant_scope` and is released when the ``with``
block exits, whether it exits normally, by exception or by cancellation.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Literal

import structlog

from shared_kernel.tenant_scoping.exceptions import (
    MissingTenantContextError,
    TenantContextAlreadyEstablishedError,
)

TenantSource = Literal["host", "header", "principal"]


@dataclass(frozen=True)
class TenantContext:
    """Admitted tenant for the current request.

    Attributes:
        tenant_id: The validated tenant identifier as a string.
        source: Which request signal resolved the tenant: 'host',
            'header' or 'principal'.
    """

    tenant_id: str
    source: TenantSource


_current_tenant: ContextVar[TenantContext | None] = ContextVar(
    "bulwark_current_tenant", default=None
)


def current_tenant() -> TenantContext | None:
    """Return the tenant context of the running request, if any."""
    return _current_tenant.get()


def current_tenant_id() -> str | None:
    """Return the current tenant id, or None outside a tenant scope."""
    context = _current_tenant.get()
    return context.tenant_id if context is not None else None


def require_tenant_id(operation: str = "tenant-scoped operation") -> str:
    """Return the current tenant id or raise MissingTenantContextError."""
    tenant_id = current_tenant_id()
    if tenant_id is None:
        raise MissingTenantContextError(operation)
    return tenant_id


@contextmanager
def tenant_scope(context: TenantContext) -> Iterator[TenantContext]:
    """Establish ``context`` as the current tenant for the enclosed block.

    The tenant id is also bound into structlog's context variables so every
    log event emitted inside the block carries it.

    Raises:
        TenantContextAlreadyEstablishedError: If a scope is already active
            in this task. Scopes are established once per request.
    """
    active = _current_tenant.get()
    if active is not None:
        raise TenantContextAlreadyEstablishedError(
            active_tenant_id=active.tenant_id,
            requested_tenant_id=context.tenant_id,
        )

    token = _current_tenant.set(context)
    try:
        with structlog.contextvars.bound_contextvars(tenant_id=context.tenant_id):
            yield context
    finally:
        _current_tenant.reset(token)
