"""SQLAlchemy ORM model for the organizations table.

Organizations are tenant scoped: the ScopeEnforcer filters every ORM
statement on this model by the current tenant.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from shared_kernel.tenant_scoping import tenant_scoped


@tenant_scoped
class OrganizationModel(Base, TimestampMixin):
    """ORM model for organizations table.

    The path column holds the materialized path (``/root/.../self``) so
    subtree queries are a single prefix match.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    settings: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_organizations_tenant_code"),
        Index("idx_organizations_tenant_parent", "tenant_id", "parent_id"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OrganizationModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"path={self.path})>"
        )
