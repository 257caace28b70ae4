"""Organization domain events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from organizations.domain.value_objects import OrganizationStatus


@dataclass(frozen=True)
class OrganizationCreated:
    """Event raised when an organization is created.

    Attributes:
        organization_id: The ULID of the created organization
        tenant_id: The ULID of the owning tenant
        name: The name of the organization
        code: The tenant-unique code
        parent_id: The ULID of the parent organization (None for roots)
        path: The materialized path
        occurred_at: When the event occurred (UTC)
    """

    organization_id: str
    tenant_id: str
    name: str
    code: str
    path: str
    occurred_at: datetime
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class OrganizationRenamed:
    organization_id: str
    tenant_id: str
    old_name: str
    new_name: str
    occurred_at: datetime


@dataclass(frozen=True)
class OrganizationStatusChanged:
    organization_id: str
    tenant_id: str
    previous_status: OrganizationStatus
    status: OrganizationStatus
    occurred_at: datetime


@dataclass(frozen=True)
class OrganizationSettingsUpdated:
    organization_id: str
    tenant_id: str
    keys: tuple[str, ...]
    occurred_at: datetime


OrganizationEvent = Union[
    OrganizationCreated,
    OrganizationRenamed,
    OrganizationStatusChanged,
    OrganizationSettingsUpdated,
]
