"""TenantAccessGuard: fail-closed admission of a candidate tenant.

Admission succeeds only for a tenant that exists and whose effective status
allows access. There is no default tenant and no anonymous fallback.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import AsyncIterator, Callable

from shared_kernel.tenant_scoping import TenantContext, tenant_scope
from tenancy.application.observability import (
    DefaultTenantAccessProbe,
    TenantAccessProbe,
)
from tenancy.application.resolver import TenantCandidate
from tenancy.domain.exceptions import TenantInactiveError, TenantNotFoundError
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.ports.repositories import ITenantDirectory


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TenantAccessGuard:
    """Validates candidates and establishes the request's tenant context."""

    def __init__(
        self,
        directory: ITenantDirectory,
        probe: TenantAccessProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._directory = directory
        self._probe = probe or DefaultTenantAccessProbe()
        self._clock = clock

    async def admit(self, candidate: TenantCandidate | None) -> Tenant:
        """Load and validate the candidate tenant.

        Raises:
            TenantNotFoundError: No candidate, a malformed id, or no such tenant
            TenantInactiveError: The tenant's effective status denies access
        """
        if candidate is None:
            self._probe.tenant_not_found(None)
            raise TenantNotFoundError()

        try:
            tenant_id = TenantId.from_string(candidate.tenant_id)
        except ValueError as e:
            self._probe.tenant_not_found(candidate.tenant_id)
            raise TenantNotFoundError(candidate.tenant_id) from e

        tenant = await self._directory.get_by_id(tenant_id)
        if tenant is None:
            self._probe.tenant_not_found(candidate.tenant_id)
            raise TenantNotFoundError(candidate.tenant_id)

        status = tenant.effective_status(self._clock())
        if not status.can_access():
            self._probe.tenant_inactive(tenant.id.value, status.value)
            raise TenantInactiveError(tenant.id.value, status)

        self._probe.tenant_admitted(tenant.id.value, candidate.source, status.value)
        return tenant

    @asynccontextmanager
    async def establish(
        self, candidate: TenantCandidate | None
    ) -> AsyncIterator[TenantContext]:
        """Admit ``candidate`` and hold its tenant context for the block.

        The context is released when the block exits, however it exits.
        """
        tenant = await self.admit(candidate)
        assert candidate is not None
        context = TenantContext(tenant_id=tenant.id.value, source=candidate.source)
        with tenant_scope(context):
            yield context
