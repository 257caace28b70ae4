"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from tenancy.domain.exceptions import InvalidTenantDomainError

# A tenant domain is a single DNS label: it is matched against the leftmost
# label of the request host.
_DOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        ULIDs are case-insensitive; the canonical upper-case form is kept.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.strip().upper())
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=str(parsed))


class TenantStatus(StrEnum):
    """Lifecycle status of a tenant.

    Only ``active`` and ``trial`` tenants may be accessed. A trial whose end
    date has passed is treated as ``expired`` by
    :meth:`Tenant.effective_status` even before the status is persisted.
    """

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"
    TRIAL = "trial"
    EXPIRED = "expired"

    @property
    def label(self) -> str:
        """Human readable label."""
        return _STATUS_LABELS[self]

    def can_access(self) -> bool:
        """Whether tenants in this status may be accessed."""
        return self in ACCESSIBLE_STATUSES


_STATUS_LABELS = {
    TenantStatus.PENDING: "Pending Activation",
    TenantStatus.ACTIVE: "Active",
    TenantStatus.SUSPENDED: "Suspended",
    TenantStatus.INACTIVE: "Inactive",
    TenantStatus.TRIAL: "Trial",
    TenantStatus.EXPIRED: "Expired",
}

ACCESSIBLE_STATUSES = frozenset({TenantStatus.ACTIVE, TenantStatus.TRIAL})

ACTIVATABLE_STATUSES = frozenset(
    {
        TenantStatus.PENDING,
        TenantStatus.INACTIVE,
        TenantStatus.SUSPENDED,
        TenantStatus.TRIAL,
    }
)


def normalize_domain(raw: str) -> str:
    """Normalize a tenant domain to its lower-case single-label form.

    Raises:
        InvalidTenantDomainError: If the value is not a single DNS label.
    """
    domain = raw.strip().lower()
    if not _DOMAIN_PATTERN.match(domain):
        raise InvalidTenantDomainError(raw)
    return domain
