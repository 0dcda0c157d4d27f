"""create_freelance_and_campaign_tables

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROJECT_STATUSES = ("proposal", "active", "completed", "cancelled")
CAMPAIGN_STATUSES = ("pending", "in-progress", "verification", "completed", "cancelled")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create freelancer and campaign-panel tables."""
    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(50)),
        sa.Column("address", sa.Text()),
        sa.Column("tags", postgresql.ARRAY(sa.String(50))),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_clients_user_id", "clients", ["user_id"])

    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "client_id",
            sa.String(36),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PROJECT_STATUSES, name="projectstatus", native_enum=False, length=20),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])
    op.create_index("ix_projects_client_id", "projects", ["client_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            sa.String(36),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(100)),
        sa.Column("reference_id", sa.String(255)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_payments_user_id", "payments", ["user_id"])
    op.create_index("ix_payments_project_id", "payments", ["project_id"])
    op.create_index("ix_payments_client_id", "payments", ["client_id"])

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("details", sa.Text()),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_payment_methods_user_id", "payment_methods", ["user_id"])

    op.create_table(
        "business_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("business_name", sa.String(255)),
        sa.Column("contact_email", sa.String(255)),
        sa.Column("phone_number", sa.String(50)),
        sa.Column("address", sa.Text()),
        sa.Column("website", sa.String(255)),
        sa.Column("logo_url", sa.String(500)),
        sa.Column("tax_id", sa.String(50)),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_business_profiles_user"),
    )
    op.create_index("ix_business_profiles_user_id", "business_profiles", ["user_id"])

    op.create_table(
        "panels",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "requires_panel3_credentials",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        *_timestamps(),
    )
    op.create_index("ix_panels_admin_user_id", "panels", ["admin_user_id"])

    op.create_table(
        "panel_users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_user_id", sa.String(64), nullable=False),
        sa.Column(
            "panel_id",
            sa.String(36),
            sa.ForeignKey("panels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_panel_users_admin_user_id", "panel_users", ["admin_user_id"])
    op.create_index("ix_panel_users_panel_id", "panel_users", ["panel_id"])

    op.create_table(
        "panel3_credentials",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_user_id", sa.String(64), nullable=False),
        sa.Column("panel3_login_id", sa.String(255), nullable=False),
        sa.Column("panel3_password_encrypted", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_panel3_credentials_admin_user_id", "panel3_credentials", ["admin_user_id"]
    )

    op.create_table(
        "campaign_reports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_user_id", sa.String(64), nullable=False),
        sa.Column("campaign_id_external", sa.String(255), nullable=False),
        sa.Column("campaign_name", sa.String(255), nullable=False),
        sa.Column(
            "panel_id",
            sa.String(36),
            sa.ForeignKey("panels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "assigned_panel_user_id",
            sa.String(36),
            sa.ForeignKey("panel_users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "panel3_credential_id",
            sa.String(36),
            sa.ForeignKey("panel3_credentials.id", ondelete="SET NULL"),
        ),
        sa.Column(
            "status",
            sa.Enum(*CAMPAIGN_STATUSES, name="campaignstatus", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("remarks", sa.Text()),
        *_timestamps(),
    )
    op.create_index(
        "ix_campaign_reports_admin_user_id", "campaign_reports", ["admin_user_id"]
    )
    op.create_index("ix_campaign_reports_panel_id", "campaign_reports", ["panel_id"])
    op.create_index(
        "ix_campaign_reports_assigned_panel_user_id",
        "campaign_reports",
        ["assigned_panel_user_id"],
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("record_id", sa.String(36), nullable=False),
        sa.Column("table_name", sa.String(100), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("old_value", sa.Text()),
        sa.Column("new_value", sa.Text()),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"])
    op.create_index("ix_audit_log_timestamp", "audit_log", ["timestamp"])


def downgrade() -> None:
    """Drop freelancer and campaign-panel tables."""
    op.drop_table("audit_log")
    op.drop_table("campaign_reports")
    op.drop_table("panel3_credentials")
    op.drop_table("panel_users")
    op.drop_table("panels")
    op.drop_table("business_profiles")
    op.drop_table("payment_methods")
    op.drop_table("payments")
    op.drop_table("projects")
    op.drop_table("clients")
