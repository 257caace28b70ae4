"""Organization application service.

Every operation runs for the tenant of the current TenantContext. Reads
are filtered by the ScopeEnforcer, so an organization of another tenant is
reported exactly like a missing one.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from organizations.application.observability import (
    DefaultOrganizationServiceProbe,
    OrganizationServiceProbe,
)
from organizations.domain.events import OrganizationEvent
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
from organizations.ports.repositories import IOrganizationRepository
from shared_kernel.events import DomainEventDispatcher, LoggingEventDispatcher
from shared_kernel.tenant_scoping import require_tenant_id


def _utc_now() -> datetime:
    return datetime.now(UTC)


class OrganizationService:
    """Application service for the organization hierarchy of one tenant."""

    def __init__(
        self,
        organization_repository: IOrganizationRepository,
        session: AsyncSession,
        dispatcher: DomainEventDispatcher | None = None,
        probe: OrganizationServiceProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._organization_repository = organization_repository
        self._session = session
        self._dispatcher = dispatcher or LoggingEventDispatcher()
        self._probe = probe or DefaultOrganizationServiceProbe()
        self._clock = clock

    async def create_organization(
        self,
        name: str,
        code: str,
        parent_id: OrganizationId | None = None,
    ) -> Organization:
        """Create a root organization, or a child of ``parent_id``.

        Raises:
            MissingTenantContextError: If no tenant context is established
            ParentOrganizationNotFoundError: If the parent is not visible
            CrossTenantHierarchyError: If the parent belongs to another tenant
            DuplicateOrganizationCodeError: If the code is taken in the tenant
        """
        tenant_id = require_tenant_id("create_organization")
        now = self._clock()

        async with self._session.begin():
            if parent_id is None:
                organization, events = Organization.create_root(
                    tenant_id=tenant_id, name=name, code=code, now=now
                )
            else:
                parent = await self._organization_repository.get_by_id(parent_id)
                if parent is None:
                    self._probe.parent_not_found(parent_id.value)
                    raise ParentOrganizationNotFoundError(parent_id.value)
                try:
                    organization, events = Organization.create_child(
                        parent, name=name, code=code, tenant_id=tenant_id, now=now
                    )
                except CrossTenantHierarchyError:
                    self._probe.cross_tenant_parent_rejected(parent_id.value)
                    raise

            try:
                await self._organization_repository.save(organization)
            except DuplicateOrganizationCodeError:
                self._probe.duplicate_organization_code(organization.code)
                raise

        self._probe.organization_created(
            organization.id.value,
            organization.parent_id.value if organization.parent_id else None,
            organization.level,
        )
        await self._dispatcher.dispatch(events)
        return organization

    async def get_organization(self, organization_id: OrganizationId) -> Organization:
        """Retrieve an organization of the current tenant.

        Raises:
            OrganizationNotFoundError: If the organization is not visible
        """
        return await self._load(organization_id)

    async def list_organizations(
        self, status: OrganizationStatus | None = None
    ) -> list[Organization]:
        return await self._organization_repository.list_all(status=status)

    async def list_children(self, organization_id: OrganizationId) -> list[Organization]:
        parent = await self._load(organization_id)
        return await self._organization_repository.list_children(parent)

    async def list_descendants(
        self, organization_id: OrganizationId
    ) -> list[Organization]:
        ancestor = await self._load(organization_id)
        return await self._organization_repository.list_descendants(ancestor)

    async def list_ancestors(self, organization_id: OrganizationId) -> list[Organization]:
        organization = await self._load(organization_id)
        return await self._organization_repository.list_ancestors(organization)

    async def rename_organization(
        self, organization_id: OrganizationId, name: str
    ) -> Organization:
        return await self._mutate(
            organization_id,
            "rename",
            lambda organization: organization.rename(name, now=self._clock()),
        )

    async def update_settings(
        self, organization_id: OrganizationId, settings: dict[str, Any]
    ) -> Organization:
        return await self._mutate(
            organization_id,
            "update_settings",
            lambda organization: organization.update_settings(
                settings, now=self._clock()
            ),
        )

    async def activate_organization(
        self, organization_id: OrganizationId
    ) -> Organization:
        return await self._mutate(
            organization_id,
            "activate",
            lambda organization: organization.activate(now=self._clock()),
        )

    async def deactivate_organization(
        self, organization_id: OrganizationId
    ) -> Organization:
        return await self._mutate(
            organization_id,
            "deactivate",
            lambda organization: organization.deactivate(now=self._clock()),
        )

    async def archive_organization(
        self, organization_id: OrganizationId
    ) -> Organization:
        return await self._mutate(
            organization_id,
            "archive",
            lambda organization: organization.archive(now=self._clock()),
        )

    async def _mutate(
        self,
        organization_id: OrganizationId,
        operation: str,
        change: Callable[[Organization], list[OrganizationEvent]],
    ) -> Organization:
        async with self._session.begin():
            organization = await self._load(organization_id)
            events = change(organization)
            if events:
                await self._organization_repository.save(organization)

        if events:
            self._probe.organization_updated(organization_id.value, operation)
            await self._dispatcher.dispatch(events)
        return organization

    async def _load(self, organization_id: OrganizationId) -> Organization:
        organization = await self._organization_repository.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id.value)
        return organization
