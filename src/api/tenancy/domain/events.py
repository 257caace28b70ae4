"""Tenant domain events.

Domain events capture facts about things that have happened to a tenant.
They are returned by the aggregate's factory and mutators and dispatched by
the application layer after the transaction commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from tenancy.domain.value_objects import TenantStatus


@dataclass(frozen=True)
class TenantCreated:
    """Event raised when a new tenant is provisioned.

    Attributes:
        tenant_id: The ULID of the created tenant
        name: The name of the tenant
        domain: The subdomain label the tenant resolves from
        status: Initial status (pending, or trial when trial days were given)
        trial_ends_at: End of the trial period, if any
        occurred_at: When the event occurred (UTC)
    """

    tenant_id: str
    name: str
    domain: str
    status: TenantStatus
    occurred_at: datetime
    trial_ends_at: Optional[datetime] = None


@dataclass(frozen=True)
class TenantActivated:
    """Event raised when a tenant becomes active.

    ``previous_status`` is ``trial`` when the activation is a trial upgrade.
    """

    tenant_id: str
    previous_status: TenantStatus
    occurred_at: datetime


@dataclass(frozen=True)
class TenantDeactivated:
    """Event raised when an active tenant is deactivated."""

    tenant_id: str
    occurred_at: datetime


@dataclass(frozen=True)
class TenantSuspended:
    """Event raised when a tenant is administratively suspended."""

    tenant_id: str
    previous_status: TenantStatus
    occurred_at: datetime


@dataclass(frozen=True)
class TenantTrialExpired:
    """Event raised when an explicit expiry check moves a trial to expired."""

    tenant_id: str
    trial_ends_at: datetime
    occurred_at: datetime


@dataclass(frozen=True)
class TenantRenamed:
    """Event raised when a tenant's display name changes."""

    tenant_id: str
    old_name: str
    new_name: str
    occurred_at: datetime


@dataclass(frozen=True)
class TenantSettingsUpdated:
    """Event raised when tenant settings are merged.

    Attributes:
        tenant_id: The ULID of the tenant
        keys: The setting keys that were written
        occurred_at: When the event occurred (UTC)
    """

    tenant_id: str
    keys: tuple[str, ...]
    occurred_at: datetime


TenantEvent = Union[
    TenantCreated,
    TenantActivated,
    TenantDeactivated,
    TenantSuspended,
    TenantTrialExpired,
    TenantRenamed,
    TenantSettingsUpdated,
]
