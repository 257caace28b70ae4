"""Unit tests for TenantService."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from tenancy.application.observability import TenantServiceProbe
from tenancy.application.services import TenantService
from tenancy.domain.events import (
    TenantActivated,
    TenantCreated,
    TenantSuspended,
    TenantTrialExpired,
)
from tenancy.domain.exceptions import (
    TenantCannotBeActivatedError,
    TenantCannotBeDeactivatedError,
    TenantNotFoundError,
)
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.ports.exceptions import DuplicateTenantDomainError
from tenancy.ports.repositories import ITenantRepository


@pytest.fixture
def mock_tenant_repo():
    repo = Mock(spec=ITenantRepository)
    repo.save = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_domain = AsyncMock(return_value=None)
    repo.list_all = AsyncMock(return_value=[])
    repo.list_lapsed_trials = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_probe():
    return Mock(spec=TenantServiceProbe)


@pytest.fixture
def tenant_service(mock_tenant_repo, mock_session, mock_dispatcher, mock_probe, now):
    return TenantService(
        tenant_repository=mock_tenant_repo,
        session=mock_session,
        dispatcher=mock_dispatcher,
        probe=mock_probe,
        clock=lambda: now,
    )


def _stored(now, status: TenantStatus, **kwargs) -> Tenant:
    return Tenant(
        id=TenantId.generate(),
        name="Acme Corp",
        domain="acme",
        status=status,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


class TestCreateTenant:
    @pytest.mark.asyncio
    async def test_saves_and_dispatches_created_event(
        self, tenant_service, mock_tenant_repo, mock_dispatcher, mock_probe, now
    ):
        tenant = await tenant_service.create_tenant(name="Acme Corp", domain="Acme")

        assert tenant.domain == "acme"
        assert tenant.status is TenantStatus.PENDING
        assert tenant.created_at == now
        mock_tenant_repo.save.assert_awaited_once_with(tenant)
        events = mock_dispatcher.dispatch.await_args.args[0]
        assert [type(e) for e in events] == [TenantCreated]
        mock_probe.tenant_created.assert_called_once_with(
            tenant.id.value, "acme", "pending"
        )

    @pytest.mark.asyncio
    async def test_trial_days_create_trial_tenant(self, tenant_service, now):
        tenant = await tenant_service.create_tenant(
            name="Acme Corp", domain="acme", trial_days=30
        )

        assert tenant.status is TenantStatus.TRIAL
        assert tenant.trial_ends_at == now + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_duplicate_domain_propagates_without_dispatch(
        self, tenant_service, mock_tenant_repo, mock_dispatcher, mock_probe
    ):
        mock_tenant_repo.save.side_effect = DuplicateTenantDomainError("acme")

        with pytest.raises(DuplicateTenantDomainError):
            await tenant_service.create_tenant(name="Acme Corp", domain="acme")

        mock_dispatcher.dispatch.assert_not_awaited()
        mock_probe.duplicate_tenant_domain.assert_called_once_with("acme")


class TestGetAndList:
    @pytest.mark.asyncio
    async def test_get_missing_tenant_raises(self, tenant_service):
        with pytest.raises(TenantNotFoundError):
            await tenant_service.get_tenant(TenantId.generate())

    @pytest.mark.asyncio
    async def test_list_passes_status_filter(self, tenant_service, mock_tenant_repo):
        await tenant_service.list_tenants(status=TenantStatus.TRIAL)

        mock_tenant_repo.list_all.assert_awaited_once_with(status=TenantStatus.TRIAL)


class TestTransitions:
    @pytest.mark.asyncio
    async def test_activate_saves_and_dispatches(
        self, tenant_service, mock_tenant_repo, mock_dispatcher, mock_probe, now
    ):
        stored = _stored(now, TenantStatus.PENDING)
        mock_tenant_repo.get_by_id.return_value = stored

        tenant = await tenant_service.activate_tenant(stored.id)

        assert tenant.status is TenantStatus.ACTIVE
        mock_tenant_repo.save.assert_awaited_once_with(stored)
        events = mock_dispatcher.dispatch.await_args.args[0]
        assert isinstance(events[0], TenantActivated)
        mock_probe.tenant_status_changed.assert_called_once_with(
            stored.id.value, "activate", "active"
        )

    @pytest.mark.asyncio
    async def test_activating_active_tenant_writes_nothing(
        self, tenant_service, mock_tenant_repo, mock_dispatcher, now
    ):
        stored = _stored(now, TenantStatus.ACTIVE)
        mock_tenant_repo.get_by_id.return_value = stored

        await tenant_service.activate_tenant(stored.id)

        mock_tenant_repo.save.assert_not_awaited()
        mock_dispatcher.dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_activation_is_recorded(
        self, tenant_service, mock_tenant_repo, mock_probe, now
    ):
        stored = _stored(now, TenantStatus.EXPIRED)
        mock_tenant_repo.get_by_id.return_value = stored

        with pytest.raises(TenantCannotBeActivatedError):
            await tenant_service.activate_tenant(stored.id)

        mock_tenant_repo.save.assert_not_awaited()
        mock_probe.transition_rejected.assert_called_once_with(
            stored.id.value, "activate", "expired"
        )

    @pytest.mark.asyncio
    async def test_deactivate_requires_active_tenant(
        self, tenant_service, mock_tenant_repo, now
    ):
        mock_tenant_repo.get_by_id.return_value = _stored(now, TenantStatus.TRIAL)

        with pytest.raises(TenantCannotBeDeactivatedError):
            await tenant_service.deactivate_tenant(TenantId.generate())

    @pytest.mark.asyncio
    async def test_suspend(self, tenant_service, mock_tenant_repo, mock_dispatcher, now):
        stored = _stored(now, TenantStatus.ACTIVE)
        mock_tenant_repo.get_by_id.return_value = stored

        tenant = await tenant_service.suspend_tenant(stored.id)

        assert tenant.status is TenantStatus.SUSPENDED
        events = mock_dispatcher.dispatch.await_args.args[0]
        assert isinstance(events[0], TenantSuspended)

    @pytest.mark.asyncio
    async def test_transition_on_missing_tenant_raises(self, tenant_service):
        with pytest.raises(TenantNotFoundError):
            await tenant_service.suspend_tenant(TenantId.generate())


class TestUpdates:
    @pytest.mark.asyncio
    async def test_update_settings_merges(
        self, tenant_service, mock_tenant_repo, mock_probe, now
    ):
        stored = _stored(now, TenantStatus.ACTIVE, settings={"theme": "dark"})
        mock_tenant_repo.get_by_id.return_value = stored

        tenant = await tenant_service.update_settings(stored.id, {"locale": "de"})

        assert tenant.settings == {"theme": "dark", "locale": "de"}
        mock_tenant_repo.save.assert_awaited_once()
        mock_probe.tenant_updated.assert_called_once_with(
            stored.id.value, "update_settings"
        )

    @pytest.mark.asyncio
    async def test_rename(self, tenant_service, mock_tenant_repo, now):
        stored = _stored(now, TenantStatus.ACTIVE)
        mock_tenant_repo.get_by_id.return_value = stored

        tenant = await tenant_service.rename_tenant(stored.id, "Acme Inc")

        assert tenant.name == "Acme Inc"


class TestExpireLapsedTrials:
    @pytest.mark.asyncio
    async def test_expires_every_lapsed_trial(
        self, tenant_service, mock_tenant_repo, mock_dispatcher, mock_probe, now
    ):
        lapsed = [
            _stored(now, TenantStatus.TRIAL, trial_ends_at=now - timedelta(days=1)),
            _stored(now, TenantStatus.TRIAL, trial_ends_at=now - timedelta(hours=1)),
        ]
        mock_tenant_repo.list_lapsed_trials.return_value = lapsed

        expired = await tenant_service.expire_lapsed_trials()

        assert expired == lapsed
        assert all(t.status is TenantStatus.EXPIRED for t in expired)
        mock_tenant_repo.list_lapsed_trials.assert_awaited_once_with(now)
        assert mock_tenant_repo.save.await_count == 2
        events = mock_dispatcher.dispatch.await_args.args[0]
        assert [type(e) for e in events] == [TenantTrialExpired, TenantTrialExpired]
        mock_probe.trials_expired.assert_called_once_with(2)

    @pytest.mark.asyncio
    async def test_no_lapsed_trials(self, tenant_service, mock_probe):
        assert await tenant_service.expire_lapsed_trials() == []
        mock_probe.trials_expired.assert_called_once_with(0)
