"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from infrastructure.settings import get_tenancy_settings
from tenancy.domain.tenant import Tenant
from tenancy.domain.value_objects import TenantStatus


def _not_blank(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class CreateTenantRequest(BaseModel):
    """Request model for provisioning a tenant."""

    name: str = Field(..., description="Tenant name", min_length=1, max_length=255)
    domain: str = Field(
        ...,
        description="Subdomain label the tenant is reached at (e.g. 'acme')",
        min_length=1,
        max_length=63,
    )
    trial_days: int | None = Field(
        default=None,
        description="Start the tenant on a trial of this many days",
        ge=1,
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Strip surrounding whitespace and reject blank names."""
        return _not_blank(value)

    @field_validator("trial_days")
    @classmethod
    def validate_trial_days(cls, value: int | None) -> int | None:
        """Reject trials longer than the configured maximum."""
        maximum = get_tenancy_settings().max_trial_days
        if value is not None and value > maximum:
            raise ValueError(f"trial_days must be at most {maximum}")
        return value


class RenameTenantRequest(BaseModel):
    """Request model for renaming a tenant."""

    name: str = Field(..., description="New tenant name", min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _not_blank(value)


class UpdateTenantSettingsRequest(BaseModel):
    """Request model for merging tenant settings."""

    settings: dict[str, Any] = Field(
        ..., description="Settings to merge into the existing settings"
    )


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Tenant name")
    domain: str = Field(..., description="Subdomain label")
    status: TenantStatus = Field(..., description="Stored lifecycle status")
    status_label: str = Field(..., description="Human readable status")
    effective_status: TenantStatus = Field(
        ..., description="Status used for access decisions"
    )
    can_access: bool = Field(..., description="Whether requests are admitted")
    settings: dict[str, Any] = Field(default_factory=dict)
    trial_ends_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response."""
        effective = tenant.effective_status()
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            domain=tenant.domain,
            status=tenant.status,
            status_label=tenant.status.label,
            effective_status=effective,
            can_access=effective.can_access(),
            settings=tenant.settings,
            trial_ends_at=tenant.trial_ends_at,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )


class ExpiredTrialsResponse(BaseModel):
    """Response model for a trial expiry sweep."""

    count: int
    tenants: list[TenantResponse]
