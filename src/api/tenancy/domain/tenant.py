"""Tenant aggregate.

Tenants are the top-level isolation boundary. A tenant is never deleted by
this service; it only moves through the status state machine:

    pending --activate--> active --deactivate--> inactive
    inactive/suspended --activate--> active
    trial --activate--> active (upgrade)
    trial --expire_trial--> expired (explicit check once trial_ends_at passed)
    any --suspend--> suspended

Every mutating operation returns the domain events it produced instead of
buffering them on the aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from tenancy.domain.events import (
    TenantActivated,
    TenantCreated,
    TenantDeactivated,
    TenantEvent,
    TenantRenamed,
    TenantSettingsUpdated,
    TenantSuspended,
    TenantTrialExpired,
)
from tenancy.domain.exceptions import (
    TenantCannotBeActivatedError,
    TenantCannotBeDeactivatedError,
)
from tenancy.domain.value_objects import (
    ACTIVATABLE_STATUSES,
    TenantId,
    TenantStatus,
    normalize_domain,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Tenant:
    """Tenant aggregate representing one isolated customer account.

    Business rules:
    - ``domain`` is globally unique and is a single lower-case DNS label
    - Only ``active`` and unexpired ``trial`` tenants can be accessed
    - ``settings`` is an open string-keyed map; updates are shallow merges
    """

    id: TenantId
    name: str
    domain: str
    status: TenantStatus
    settings: dict[str, Any] = field(default_factory=dict)
    trial_ends_at: datetime | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(
        cls,
        name: str,
        domain: str,
        trial_days: int | None = None,
        now: datetime | None = None,
    ) -> tuple[Tenant, list[TenantEvent]]:
        """Factory method for provisioning a new tenant.

        The tenant starts ``pending``. When ``trial_days`` is given it starts
        in ``trial`` instead, with ``trial_ends_at`` exactly ``trial_days``
        after ``created_at``.

        Returns:
            The new Tenant and the TenantCreated event

        Raises:
            InvalidTenantDomainError: If ``domain`` is not a single DNS label
            ValueError: If ``trial_days`` is not positive
        """
        if trial_days is not None and trial_days < 1:
            raise ValueError("trial_days must be a positive number of days")

        created_at = now or _utc_now()
        trial_ends_at = (
            created_at + timedelta(days=trial_days) if trial_days is not None else None
        )
        tenant = cls(
            id=TenantId.generate(),
            name=name,
            domain=normalize_domain(domain),
            status=TenantStatus.TRIAL if trial_ends_at else TenantStatus.PENDING,
            trial_ends_at=trial_ends_at,
            created_at=created_at,
            updated_at=created_at,
        )
        event = TenantCreated(
            tenant_id=tenant.id.value,
            name=tenant.name,
            domain=tenant.domain,
            status=tenant.status,
            trial_ends_at=trial_ends_at,
            occurred_at=created_at,
        )
        return tenant, [event]

    def activate(self, now: datetime | None = None) -> list[TenantEvent]:
        """Activate the tenant.

        Activating an already active tenant is a no-op and produces no events.

        Raises:
            TenantCannotBeActivatedError: If the tenant is ``expired``
        """
        if self.status is TenantStatus.ACTIVE:
            return []
        if self.status not in ACTIVATABLE_STATUSES:
            raise TenantCannotBeActivatedError(self.id.value, self.status)

        previous = self.status
        self._transition(TenantStatus.ACTIVE, now)
        return [
            TenantActivated(
                tenant_id=self.id.value,
                previous_status=previous,
                occurred_at=self.updated_at,
            )
        ]

    def deactivate(self, now: datetime | None = None) -> list[TenantEvent]:
        """Deactivate an active tenant.

        Raises:
            TenantCannotBeDeactivatedError: If the tenant is not ``active``
        """
        if self.status is not TenantStatus.ACTIVE:
            raise TenantCannotBeDeactivatedError(self.id.value, self.status)

        self._transition(TenantStatus.INACTIVE, now)
        return [TenantDeactivated(tenant_id=self.id.value, occurred_at=self.updated_at)]

    def suspend(self, now: datetime | None = None) -> list[TenantEvent]:
        """Suspend the tenant from any status. Suspending twice is a no-op."""
        if self.status is TenantStatus.SUSPENDED:
            return []

        previous = self.status
        self._transition(TenantStatus.SUSPENDED, now)
        return [
            TenantSuspended(
                tenant_id=self.id.value,
                previous_status=previous,
                occurred_at=self.updated_at,
            )
        ]

    def expire_trial(self, now: datetime | None = None) -> list[TenantEvent]:
        """Move a lapsed trial to ``expired``.

        Returns no events when the tenant is not a trial or the trial is
        still running.
        """
        now = now or _utc_now()
        if not self.is_trial_expired(now):
            return []

        assert self.trial_ends_at is not None
        self._transition(TenantStatus.EXPIRED, now)
        return [
            TenantTrialExpired(
                tenant_id=self.id.value,
                trial_ends_at=self.trial_ends_at,
                occurred_at=now,
            )
        ]

    def rename(self, name: str, now: datetime | None = None) -> list[TenantEvent]:
        """Change the display name of the tenant."""
        if name == self.name:
            return []

        old_name = self.name
        self.name = name
        self.updated_at = now or _utc_now()
        return [
            TenantRenamed(
                tenant_id=self.id.value,
                old_name=old_name,
                new_name=name,
                occurred_at=self.updated_at,
            )
        ]

    def update_settings(
        self, settings: dict[str, Any], now: datetime | None = None
    ) -> list[TenantEvent]:
        """Shallow-merge ``settings`` into the tenant settings."""
        if not settings:
            return []

        self.settings = {**self.settings, **settings}
        self.updated_at = now or _utc_now()
        return [
            TenantSettingsUpdated(
                tenant_id=self.id.value,
                keys=tuple(sorted(settings)),
                occurred_at=self.updated_at,
            )
        ]

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Return a single setting value or ``default``."""
        return self.settings.get(key, default)

    def is_trial_expired(self, now: datetime | None = None) -> bool:
        """True if the tenant is on a trial whose end date has passed."""
        if self.status is not TenantStatus.TRIAL or self.trial_ends_at is None:
            return False
        return self.trial_ends_at < (now or _utc_now())

    def effective_status(self, now: datetime | None = None) -> TenantStatus:
        """Status used for access decisions.

        A lapsed trial reports ``expired`` even while the stored status is
        still ``trial``.
        """
        if self.is_trial_expired(now):
            return TenantStatus.EXPIRED
        return self.status

    def can_access(self, now: datetime | None = None) -> bool:
        """Whether requests may be admitted for this tenant."""
        return self.effective_status(now).can_access()

    def _transition(self, status: TenantStatus, now: datetime | None) -> None:
        self.status = status
        self.updated_at = now or _utc_now()
