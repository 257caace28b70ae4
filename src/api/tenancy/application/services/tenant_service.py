"""Tenant application service.

Handles tenant management: provisioning, lifecycle transitions, settings
and trial expiry. These operations run outside any tenant context because
the tenant registry is exempt from tenant scoping.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.events import DomainEventDispatcher, LoggingEventDispatcher
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.domain.events import TenantEvent
from tenancy.domain.exceptions import (
    TenantCannotBeActivatedError,
    TenantCannotBeDeactivatedError,
    TenantNotFoundError,
)
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.ports.exceptions import DuplicateTenantDomainError
from tenancy.ports.repositories import ITenantRepository


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TenantService:
    """Application service for tenant management.

    Every write runs in its own transaction. Domain events returned by the
    aggregate are dispatched only after the transaction commits.
    """

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        dispatcher: DomainEventDispatcher | None = None,
        probe: TenantServiceProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize TenantService with dependencies.

        Args:
            tenant_repository: Repository for tenant persistence
            session: Database session for transaction management
            dispatcher: Receives domain events after commit
            probe: Optional domain probe for observability
            clock: Source of the current time
        """
        self._tenant_repository = tenant_repository
        self._session = session
        self._dispatcher = dispatcher or LoggingEventDispatcher()
        self._probe = probe or DefaultTenantServiceProbe()
        self._clock = clock

    async def create_tenant(
        self,
        name: str,
        domain: str,
        trial_days: int | None = None,
    ) -> Tenant:
        """Provision a new tenant.

        Raises:
            InvalidTenantDomainError: If the domain is not a single DNS label
            DuplicateTenantDomainError: If the domain is already taken
        """
        async with self._session.begin():
            tenant, events = Tenant.create(
                name=name, domain=domain, trial_days=trial_days, now=self._clock()
            )
            try:
                await self._tenant_repository.save(tenant)
            except DuplicateTenantDomainError:
                self._probe.duplicate_tenant_domain(tenant.domain)
                raise

        self._probe.tenant_created(tenant.id.value, tenant.domain, tenant.status.value)
        await self._dispatcher.dispatch(events)
        return tenant

    async def get_tenant(self, tenant_id: TenantId) -> Tenant:
        """Retrieve a tenant by ID.

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        tenant = await self._tenant_repository.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id.value)
        return tenant

    async def list_tenants(self, status: TenantStatus | None = None) -> list[Tenant]:
        return await self._tenant_repository.list_all(status=status)

    async def activate_tenant(self, tenant_id: TenantId) -> Tenant:
        """Activate a tenant; activating an active tenant changes nothing.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantCannotBeActivatedError: If the tenant is expired
        """
        return await self._transition(tenant_id, "activate")

    async def deactivate_tenant(self, tenant_id: TenantId) -> Tenant:
        """Deactivate an active tenant.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantCannotBeDeactivatedError: If the tenant is not active
        """
        return await self._transition(tenant_id, "deactivate")

    async def suspend_tenant(self, tenant_id: TenantId) -> Tenant:
        return await self._transition(tenant_id, "suspend")

    async def rename_tenant(self, tenant_id: TenantId, name: str) -> Tenant:
        return await self._mutate(
            tenant_id, "rename", lambda tenant: tenant.rename(name, now=self._clock())
        )

    async def update_settings(
        self, tenant_id: TenantId, settings: dict[str, Any]
    ) -> Tenant:
        """Shallow-merge ``settings`` into the tenant settings."""
        return await self._mutate(
            tenant_id,
            "update_settings",
            lambda tenant: tenant.update_settings(settings, now=self._clock()),
        )

    async def expire_lapsed_trials(self) -> list[Tenant]:
        """Move every trial whose end date has passed to ``expired``.

        Returns:
            The tenants that were expired by this call
        """
        now = self._clock()
        events: list[TenantEvent] = []
        expired: list[Tenant] = []
        async with self._session.begin():
            for tenant in await self._tenant_repository.list_lapsed_trials(now):
                tenant_events = tenant.expire_trial(now)
                if tenant_events:
                    await self._tenant_repository.save(tenant)
                    events.extend(tenant_events)
                    expired.append(tenant)

        for tenant in expired:
            self._probe.tenant_status_changed(
                tenant.id.value, "expire_trial", tenant.status.value
            )
        self._probe.trials_expired(len(expired))
        await self._dispatcher.dispatch(events)
        return expired

    async def _transition(self, tenant_id: TenantId, operation: str) -> Tenant:
        now = self._clock()
        async with self._session.begin():
            tenant = await self._load(tenant_id)
            try:
                events = getattr(tenant, operation)(now=now)
            except (TenantCannotBeActivatedError, TenantCannotBeDeactivatedError):
                self._probe.transition_rejected(
                    tenant_id.value, operation, tenant.status.value
                )
                raise
            if events:
                await self._tenant_repository.save(tenant)

        if events:
            self._probe.tenant_status_changed(
                tenant_id.value, operation, tenant.status.value
            )
            await self._dispatcher.dispatch(events)
        return tenant

    async def _mutate(
        self,
        tenant_id: TenantId,
        operation: str,
        change: Callable[[Tenant], list[TenantEvent]],
    ) -> Tenant:
        async with self._session.begin():
            tenant = await self._load(tenant_id)
            events = change(tenant)
            if events:
                await self._tenant_repository.save(tenant)

        if events:
            self._probe.tenant_updated(tenant_id.value, operation)
            await self._dispatcher.dispatch(events)
        return tenant

    async def _load(self, tenant_id: TenantId) -> Tenant:
        tenant = await self._tenant_repository.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id.value)
        return tenant
