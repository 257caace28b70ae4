"""SQLAlchemy implementation of the tenant repository and TenantDirectory.

Tenants are the registry that tenant scoping is built on, so this repository
runs without a tenant context and is never filtered by the ScopeEnforcer.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from tenancy.ports.exceptions import DuplicateTenantDomainError
from tenancy.ports.repositories import ITenantRepository


def _as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes returned by backends without timezones."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class TenantRepository(ITenantRepository):
    """Repository managing storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Insert or update a tenant.

        Raises:
            DuplicateTenantDomainError: If another tenant owns the domain
        """
        existing = await self.get_by_domain(tenant.domain)
        if existing and existing.id != tenant.id:
            self._probe.duplicate_tenant_domain(tenant.domain)
            raise DuplicateTenantDomainError(tenant.domain)

        try:
            stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = TenantModel(id=tenant.id.value, created_at=tenant.created_at)
                self._session.add(model)

            model.name = tenant.name
            model.domain = tenant.domain
            model.status = tenant.status.value
            model.settings = dict(tenant.settings)
            model.trial_ends_at = tenant.trial_ends_at
            model.updated_at = tenant.updated_at

            await self._session.flush()
            self._probe.tenant_saved(tenant.id.value, tenant.status.value)

        except IntegrityError as e:
            if "domain" in str(e):
                self._probe.duplicate_tenant_domain(tenant.domain)
                raise DuplicateTenantDomainError(tenant.domain) from e
            raise

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_found(tenant_id.value)
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_domain(self, domain: str) -> Tenant | None:
        """Fetch a tenant by domain. Domains are stored lower-case."""
        stmt = select(TenantModel).where(TenantModel.domain == domain.lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.domain_not_found(domain)
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def list_all(self, status: TenantStatus | None = None) -> list[Tenant]:
        stmt = select(TenantModel).order_by(TenantModel.name, TenantModel.id)
        if status is not None:
            stmt = stmt.where(TenantModel.status == status.value)
        result = await self._session.execute(stmt)
        tenants = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.tenants_listed(len(tenants))
        return tenants

    async def list_lapsed_trials(self, now: datetime) -> list[Tenant]:
        stmt = (
            select(TenantModel)
            .where(TenantModel.status == TenantStatus.TRIAL.value)
            .where(TenantModel.trial_ends_at.is_not(None))
            .where(TenantModel.trial_ends_at < now)
            .order_by(TenantModel.trial_ends_at)
        )
        result = await self._session.execute(stmt)
        tenants = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.tenants_listed(len(tenants))
        return tenants

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        """Reconstitute a Tenant aggregate from its row."""
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            domain=model.domain,
            status=TenantStatus(model.status),
            settings=dict(model.settings or {}),
            trial_ends_at=_as_utc(model.trial_ends_at),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )
