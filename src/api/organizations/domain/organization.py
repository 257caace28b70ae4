"""Organization aggregate.

Organizations subdivide a tenant into an unbounded hierarchy. Each one
carries a materialized path (see :mod:`organizations.domain.path_index`)
which makes ancestor and descendant queries possible without recursion.
Organizations are never re-parented and never move between tenants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Optional

from organizations.domain import path_index
from organizations.domain.events import (
    OrganizationCreated,
    OrganizationEvent,
    OrganizationRenamed,
    OrganizationSettingsUpdated,
    OrganizationStatusChanged,
)
from organizations.domain.exceptions import (
    CrossTenantHierarchyError,
    InvalidOrganizationPathError,
)
from organizations.domain.value_objects import OrganizationId, OrganizationStatus


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Organization:
    """Organization aggregate.

    Business rules:
    - ``path`` ends with ``id`` and ``level`` equals the number of path
      segments minus one
    - Roots have no parent; a child's parent is the second-to-last segment
    - A child always belongs to its parent's tenant
    - ``code`` is unique within the tenant (enforced by the repository)
    """

    id: OrganizationId
    tenant_id: str
    name: str
    code: str
    path: str
    level: int
    parent_id: Optional[OrganizationId] = None
    status: OrganizationStatus = OrganizationStatus.ACTIVE
    settings: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate the path invariants after initialization."""
        self._validate_name(self.name)
        self._validate_code(self.code)
        self._validate_path()

    def _validate_name(self, name: str) -> None:
        if not name or not name.strip() or len(name) > 255:
            raise ValueError("Organization name must be between 1 and 255 characters")

    def _validate_code(self, code: str) -> None:
        if not code or not code.strip() or len(code) > 50:
            raise ValueError("Organization code must be between 1 and 50 characters")

    def _validate_path(self) -> None:
        segments = path_index.path_segments(self.path)
        if segments[-1] != self.id.value:
            raise InvalidOrganizationPathError(
                self.path, f"last segment must be the organization id {self.id}"
            )
        if self.level != len(segments) - 1:
            raise InvalidOrganizationPathError(
                self.path, f"level {self.level} does not match path depth"
            )
        expected_parent = segments[-2] if len(segments) > 1 else None
        actual_parent = self.parent_id.value if self.parent_id else None
        if expected_parent != actual_parent:
            raise InvalidOrganizationPathError(
                self.path, f"parent {actual_parent} does not match path"
            )

    @classmethod
    def create_root(
        cls,
        tenant_id: str,
        name: str,
        code: str,
        now: datetime | None = None,
    ) -> tuple[Organization, list[OrganizationEvent]]:
        """Create a top-level organization: no parent, level 0, path ``/id``.

        Returns:
            The new Organization and its OrganizationCreated event
        """
        created_at = now or _utc_now()
        organization_id = OrganizationId.generate()
        organization = cls(
            id=organization_id,
            tenant_id=tenant_id,
            name=name,
            code=code.strip(),
            path=path_index.root_path(organization_id.value),
            level=0,
            created_at=created_at,
            updated_at=created_at,
        )
        return organization, [organization._created_event()]

    @classmethod
    def create_child(
        cls,
        parent: Organization,
        name: str,
        code: str,
        tenant_id: str | None = None,
        now: datetime | None = None,
    ) -> tuple[Organization, list[OrganizationEvent]]:
        """Create an organization directly below ``parent``.

        The child inherits the parent's tenant. Passing ``tenant_id`` states
        the tenant the caller is acting for; it must equal the parent's.

        Raises:
            CrossTenantHierarchyError: If ``tenant_id`` differs from the
                parent's tenant
        """
        if tenant_id is not None and tenant_id != parent.tenant_id:
            raise CrossTenantHierarchyError(
                parent_id=parent.id.value,
                parent_tenant_id=parent.tenant_id,
                tenant_id=tenant_id,
            )

        created_at = now or _utc_now()
        organization_id = OrganizationId.generate()
        organization = cls(
            id=organization_id,
            tenant_id=parent.tenant_id,
            name=name,
            code=code.strip(),
            path=path_index.child_path(parent.path, organization_id.value),
            level=parent.level + 1,
            parent_id=parent.id,
            created_at=created_at,
            updated_at=created_at,
        )
        return organization, [organization._created_event()]

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def is_child_of(self, other: Organization) -> bool:
        return self.parent_id == other.id

    def is_descendant_of(self, ancestor: Organization) -> bool:
        """True if this organization lies strictly below ``ancestor``."""
        return (
            self.id != ancestor.id
            and self.tenant_id == ancestor.tenant_id
            and path_index.is_descendant_path(self.path, ancestor.path)
        )

    def ancestor_ids(self) -> list[OrganizationId]:
        """Ancestors from the root down to the immediate parent."""
        return [
            OrganizationId(value=segment)
            for segment in path_index.ancestor_ids(self.path)
        ]

    def rename(self, name: str, now: datetime | None = None) -> list[OrganizationEvent]:
        self._validate_name(name)
        if name == self.name:
            return []

        old_name = self.name
        self.name = name
        self.updated_at = now or _utc_now()
        return [
            OrganizationRenamed(
                organization_id=self.id.value,
                tenant_id=self.tenant_id,
                old_name=old_name,
                new_name=name,
                occurred_at=self.updated_at,
            )
        ]

    def activate(self, now: datetime | None = None) -> list[OrganizationEvent]:
        return self._change_status(OrganizationStatus.ACTIVE, now)

    def deactivate(self, now: datetime | None = None) -> list[OrganizationEvent]:
        return self._change_status(OrganizationStatus.INACTIVE, now)

    def archive(self, now: datetime | None = None) -> list[OrganizationEvent]:
        return self._change_status(OrganizationStatus.ARCHIVED, now)

    def update_settings(
        self, settings: dict[str, Any], now: datetime | None = None
    ) -> list[OrganizationEvent]:
        """Shallow-merge ``settings`` into the organization settings."""
        if not settings:
            return []

        self.settings = {**self.settings, **settings}
        self.updated_at = now or _utc_now()
        return [
            OrganizationSettingsUpdated(
                organization_id=self.id.value,
                tenant_id=self.tenant_id,
                keys=tuple(sorted(settings)),
                occurred_at=self.updated_at,
            )
        ]

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def _change_status(
        self, status: OrganizationStatus, now: datetime | None
    ) -> list[OrganizationEvent]:
        if self.status is status:
            return []

        previous = self.status
        self.status = status
        self.updated_at = now or _utc_now()
        return [
            OrganizationStatusChanged(
                organization_id=self.id.value,
                tenant_id=self.tenant_id,
                previous_status=previous,
                status=status,
                occurred_at=self.updated_at,
            )
        ]

    def _created_event(self) -> OrganizationCreated:
        return OrganizationCreated(
            organization_id=self.id.value,
            tenant_id=self.tenant_id,
            name=self.name,
            code=self.code,
            path=self.path,
            parent_id=self.parent_id.value if self.parent_id else None,
            occurred_at=self.created_at,
        )
