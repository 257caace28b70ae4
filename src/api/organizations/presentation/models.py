"""Pydantic models for organization API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from organizations.domain.organization import Organization
from organizations.domain.value_objects import OrganizationStatus


def _not_blank(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class CreateOrganizationRequest(BaseModel):
    """Request model for creating an organization.

    Omit ``parent_id`` to create a top-level organization.
    """

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(
        ..., description="Code unique within the tenant", min_length=1, max_length=50
    )
    parent_id: str | None = Field(default=None, description="Parent organization ID")

    @field_validator("name", "code")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        return _not_blank(value)


class RenameOrganizationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        return _not_blank(value)


class UpdateOrganizationSettingsRequest(BaseModel):
    settings: dict[str, Any] = Field(
        ..., description="Settings to merge into the existing settings"
    )


class OrganizationResponse(BaseModel):
    """Response model for organization.

    ``tenant_id`` is always the tenant of the request.
    """

    id: str = Field(..., description="Organization ID (ULID format)")
    tenant_id: str
    name: str
    code: str
    parent_id: str | None = None
    level: int = Field(..., description="Depth in the hierarchy; roots are 0")
    path: str = Field(..., description="Materialized path from the root")
    status: OrganizationStatus
    status_label: str
    settings: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, organization: Organization) -> OrganizationResponse:
        return cls(
            id=organization.id.value,
            tenant_id=organization.tenant_id,
            name=organization.name,
            code=organization.code,
            parent_id=organization.parent_id.value if organization.parent_id else None,
            level=organization.level,
            path=organization.path,
            status=organization.status,
            status_label=organization.status.label,
            settings=organization.settings,
            created_at=organization.created_at,
            updated_at=organization.updated_at,
        )
