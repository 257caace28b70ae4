"""SQLAlchemy implementation of the organization repository.

The repository never filters by tenant itself: the session is a
TenantScopedSession, so the ScopeEnforcer adds the tenant criteria to every
statement and checks every flushed row.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from organizations.domain import path_index
from organizations.domain.organization import Organization
from organizations.domain.value_objects import OrganizationId, OrganizationStatus
from organizations.infrastructure.models import OrganizationModel
from organizations.infrastructure.observability import (
    DefaultOrganizationRepositoryProbe,
    OrganizationRepositoryProbe,
)
from organizations.ports.exceptions import DuplicateOrganizationCodeError
from organizations.ports.repositories import IOrganizationRepository


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def descendant_filter(ancestor_path: str):
    """Criteria matching the rows strictly below ``ancestor_path``."""
    return OrganizationModel.path.startswith(
        path_index.descendant_prefix(ancestor_path), autoescape=True
    )


class OrganizationRepository(IOrganizationRepository):
    """Repository managing storage for Organization aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: OrganizationRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultOrganizationRepositoryProbe()

    async def save(self, organization: Organization) -> None:
        """Insert or update an organization.

        Structural columns (tenant, parent, path, level) are written on
        insert only; organizations never move.

        Raises:
            DuplicateOrganizationCodeError: If the code is taken in the tenant
            TenantScopeViolation: If the organization belongs to another tenant
        """
        existing = await self.get_by_code(organization.code)
        if existing and existing.id != organization.id:
            self._probe.duplicate_organization_code(organization.code)
            raise DuplicateOrganizationCodeError(organization.code)

        try:
            stmt = select(OrganizationModel).where(
                OrganizationModel.id == organization.id.value
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = OrganizationModel(
                    id=organization.id.value,
                    tenant_id=organization.tenant_id,
                    parent_id=(
                        organization.parent_id.value
                        if organization.parent_id
                        else None
                    ),
                    level=organization.level,
                    path=organization.path,
                    created_at=organization.created_at,
                )
                self._session.add(model)

            model.name = organization.name
            model.code = organization.code
            model.status = organization.status.value
            model.settings = dict(organization.settings)
            model.updated_at = organization.updated_at

            await self._session.flush()
            self._probe.organization_saved(organization.id.value, organization.path)

        except IntegrityError as e:
            if "code" in str(e):
                self._probe.duplicate_organization_code(organization.code)
                raise DuplicateOrganizationCodeError(organization.code) from e
            raise

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        stmt = select(OrganizationModel).where(
            OrganizationModel.id == organization_id.value
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.organization_not_found(organization_id.value)
            return None

        self._probe.organization_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_code(self, code: str) -> Organization | None:
        stmt = select(OrganizationModel).where(OrganizationModel.code == code)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_all(
        self, status: OrganizationStatus | None = None
    ) -> list[Organization]:
        stmt = select(OrganizationModel).order_by(OrganizationModel.path)
        if status is not None:
            stmt = stmt.where(OrganizationModel.status == status.value)
        return await self._list("all", stmt)

    async def list_children(self, parent: Organization) -> list[Organization]:
        stmt = (
            select(OrganizationModel)
            .where(OrganizationModel.parent_id == parent.id.value)
            .order_by(OrganizationModel.name, OrganizationModel.id)
        )
        return await self._list("children", stmt)

    async def list_descendants(self, ancestor: Organization) -> list[Organization]:
        stmt = (
            select(OrganizationModel)
            .where(descendant_filter(ancestor.path))
            .order_by(OrganizationModel.path)
        )
        return await self._list("descendants", stmt)

    async def list_ancestors(self, organization: Organization) -> list[Organization]:
        ids = path_index.ancestor_ids(organization.path)
        if not ids:
            return []
        stmt = (
            select(OrganizationModel)
            .where(OrganizationModel.id.in_(ids))
            .order_by(OrganizationModel.level)
        )
        return await self._list("ancestors", stmt)

    async def _list(self, query: str, stmt) -> list[Organization]:
        result = await self._session.execute(stmt)
        organizations = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.organizations_listed(query, len(organizations))
        return organizations

    @staticmethod
    def _to_domain(model: OrganizationModel) -> Organization:
        """Reconstitute an Organization aggregate from its row."""
        return Organization(
            id=OrganizationId(value=model.id),
            tenant_id=model.tenant_id,
            name=model.name,
            code=model.code,
            path=model.path,
            level=model.level,
            parent_id=OrganizationId(value=model.parent_id) if model.parent_id else None,
            status=OrganizationStatus(model.status),
            settings=dict(model.settings or {}),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )
