"""Value objects for the organizations domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class OrganizationId:
    """Identifier for an Organization aggregate.

    ULIDs use Crockford base32, so an id can never contain the path
    separator.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> OrganizationId:
        """Generate a new OrganizationId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> OrganizationId:
        """Create OrganizationId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.strip().upper())
        except ValueError as e:
            raise ValueError(f"Invalid OrganizationId: {value}") from e

        return cls(value=str(parsed))


class OrganizationStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def is_active(self) -> bool:
        return self is OrganizationStatus.ACTIVE
