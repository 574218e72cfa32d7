"""Initial schema — organizations, roles, membership and reports.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Organizations
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("slug", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"])
    op.create_index("ix_organizations_parent_id", "organizations", ["parent_id"])

    # Membership
    op.create_table(
        "organization_users",
        sa.Column(
            "organization_id",
            sa.Integer,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("user_id", sa.Integer, primary_key=True),
    )
    op.create_index("ix_organization_users_user_id", "organization_users", ["user_id"])

    # Roles
    op.create_table(
        "organization_roles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "organization_id",
            sa.Integer,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer, nullable=True),
        sa.Column("role", sa.String(255), nullable=False),
        sa.Column("rank", sa.Integer, nullable=True),
        sa.Column("position", sa.Integer, nullable=True),
        sa.UniqueConstraint("organization_id", "user_id", name="uq_organization_roles_org_user"),
    )
    op.create_index("ix_organization_roles_organization_id", "organization_roles", ["organization_id"])
    op.create_index("ix_organization_roles_user_id", "organization_roles", ["user_id"])

    # Reports
    op.create_table(
        "organization_reports",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "role_id",
            sa.Integer,
            sa.ForeignKey("organization_roles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("term_start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("submission_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("comments", sa.Text, nullable=True),
        sa.Column("ack_user_id", sa.Integer, nullable=True),
        sa.Column("ack_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_modified", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_organization_reports_role_id", "organization_reports", ["role_id"])


def downgrade() -> None:
    op.drop_table("organization_reports")
    op.drop_table("organization_roles")
    op.drop_table("organization_users")
    op.drop_table("organizations")
