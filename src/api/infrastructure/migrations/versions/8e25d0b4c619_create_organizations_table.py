"""create organizations table

Revision ID: 8e25d0b4c619
Revises: 3c7a1e9f2b40
Create Date: 2026-10-05 09:41:02.118930

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8e25d0b4c619"
down_revision: Union[str, Sequence[str], None] = "3c7a1e9f2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("tenant_id", sa.String(length=26), nullable=False),
        sa.Column("parent_id", sa.String(length=26), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("path", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Tenants with organizations cannot be deleted
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["parent_id"], ["organizations.id"], ondelete="RESTRICT"
        ),
        sa.UniqueConstraint("tenant_id", "code", name="uq_organizations_tenant_code"),
    )
    op.create_index(
        "ix_organizations_tenant_id", "organizations", ["tenant_id"], unique=False
    )
    op.create_index(
        "idx_organizations_tenant_parent",
        "organizations",
        ["tenant_id", "parent_id"],
        unique=False,
    )
    op.create_index("ix_organizations_path", "organizations", ["path"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_organizations_path", table_name="organizations")
    op.drop_index("idx_organizations_tenant_parent", table_name="organizations")
    op.drop_index("ix_organizations_tenant_id", table_name="organizations")
    op.drop_table("organizations")
