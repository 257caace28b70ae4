"""Unit tests for TenantAccessGuard.

Admission is fail-closed: every path that is not an existing, accessible
tenant must raise.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from shared_kernel.tenant_scoping import current_tenant, current_tenant_id
from tenancy.application.access_guard import TenantAccessGuard
from tenancy.application.observability import TenantAccessProbe
from tenancy.application.resolver import TenantCandidate
from tenancy.domain.exceptions import TenantInactiveError, TenantNotFoundError
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantId, TenantStatus
from tenancy.ports.repositories import ITenantDirectory


def _tenant(now, status: TenantStatus, trial_days: int | None = None) -> Tenant:
    return Tenant(
        id=TenantId.generate(),
        name="Acme Corp",
        domain="acme",
        status=status,
        trial_ends_at=now + timedelta(days=trial_days) if trial_days else None,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def mock_directory():
    directory = Mock(spec=ITenantDirectory)
    directory.get_by_id = AsyncMock(return_value=None)
    return directory


@pytest.fixture
def mock_probe():
    return Mock(spec=TenantAccessProbe)


@pytest.fixture
def guard(mock_directory, mock_probe, now) -> TenantAccessGuard:
    return TenantAccessGuard(
        directory=mock_directory, probe=mock_probe, clock=lambda: now
    )


class TestAdmit:
    @pytest.mark.asyncio
    async def test_admits_active_tenant(self, guard, mock_directory, mock_probe, now):
        tenant = _tenant(now, TenantStatus.ACTIVE)
        mock_directory.get_by_id.return_value = tenant

        admitted = await guard.admit(TenantCandidate(tenant.id.value, "header"))

        assert admitted is tenant
        mock_probe.tenant_admitted.assert_called_once_with(
            tenant.id.value, "header", "active"
        )

    @pytest.mark.asyncio
    async def test_admits_running_trial(self, guard, mock_directory, now):
        tenant = _tenant(now, TenantStatus.TRIAL, trial_days=3)
        mock_directory.get_by_id.return_value = tenant

        assert await guard.admit(TenantCandidate(tenant.id.value, "host")) is tenant

    @pytest.mark.asyncio
    async def test_missing_candidate_is_not_found(self, guard, mock_directory):
        with pytest.raises(TenantNotFoundError) as exc_info:
            await guard.admit(None)

        assert exc_info.value.tenant_id is None
        mock_directory.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, guard, mock_directory):
        with pytest.raises(TenantNotFoundError) as exc_info:
            await guard.admit(TenantCandidate("not-a-ulid", "header"))

        assert exc_info.value.tenant_id == "not-a-ulid"
        mock_directory.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_not_found(self, guard):
        with pytest.raises(TenantNotFoundError):
            await guard.admit(TenantCandidate(TenantId.generate().value, "header"))

    @pytest.mark.asyncio
    async def test_lower_case_id_is_looked_up_canonically(
        self, guard, mock_directory, now
    ):
        tenant = _tenant(now, TenantStatus.ACTIVE)
        mock_directory.get_by_id.return_value = tenant

        await guard.admit(TenantCandidate(tenant.id.value.lower(), "header"))

        mock_directory.get_by_id.assert_awaited_once_with(tenant.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [
            TenantStatus.PENDING,
            TenantStatus.SUSPENDED,
            TenantStatus.INACTIVE,
            TenantStatus.EXPIRED,
        ],
    )
    async def test_inaccessible_status_is_rejected(
        self, guard, mock_directory, mock_probe, now, status
    ):
        tenant = _tenant(now, status)
        mock_directory.get_by_id.return_value = tenant

        with pytest.raises(TenantInactiveError) as exc_info:
            await guard.admit(TenantCandidate(tenant.id.value, "header"))

        assert exc_info.value.status is status
        mock_probe.tenant_inactive.assert_called_once_with(tenant.id.value, status.value)

    @pytest.mark.asyncio
    async def test_lapsed_trial_is_rejected_as_expired(self, guard, mock_directory, now):
        tenant = _tenant(now, TenantStatus.TRIAL)
        tenant.trial_ends_at = now - timedelta(minutes=1)
        mock_directory.get_by_id.return_value = tenant

        with pytest.raises(TenantInactiveError) as exc_info:
            await guard.admit(TenantCandidate(tenant.id.value, "header"))

        assert exc_info.value.status is TenantStatus.EXPIRED


class TestEstablish:
    @pytest.mark.asyncio
    async def test_context_is_held_for_the_block_only(self, guard, mock_directory, now):
        tenant = _tenant(now, TenantStatus.ACTIVE)
        mock_directory.get_by_id.return_value = tenant

        async with guard.establish(TenantCandidate(tenant.id.value, "host")) as context:
            assert context.tenant_id == tenant.id.value
            assert context.source == "host"
            assert current_tenant() == context

        assert current_tenant_id() is None

    @pytest.mark.asyncio
    async def test_context_is_released_on_error(self, guard, mock_directory, now):
        tenant = _tenant(now, TenantStatus.ACTIVE)
        mock_directory.get_by_id.return_value = tenant

        with pytest.raises(RuntimeError):
            async with guard.establish(TenantCandidate(tenant.id.value, "host")):
                raise RuntimeError("handler failed")

        assert current_tenant_id() is None

    @pytest.mark.asyncio
    async def test_rejected_candidate_establishes_nothing(self, guard):
        with pytest.raises(TenantNotFoundError):
            async with guard.establish(None):
                pytest.fail("block must not run")

        assert current_tenant_id() is None
