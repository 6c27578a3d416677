"""initial schema

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1a9c2e7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _stage_columns() -> list[sa.Column]:
    # Money columns hold integer paise.
    return [
        sa.Column("base_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("pm_decision", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("pm_debit", sa.Integer, nullable=False, server_default="0"),
        sa.Column("pm_note", sa.Text, nullable=False, server_default=""),
        sa.Column("qc_decision", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("qc_debit", sa.Integer, nullable=False, server_default="0"),
        sa.Column("qc_note", sa.Text, nullable=False, server_default=""),
        sa.Column("billing_decision", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("billing_note", sa.Text, nullable=False, server_default=""),
        sa.Column("final_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_by", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("principal", sa.Text, nullable=False, unique=True),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
        sa.Column("email", sa.Text, nullable=False, server_default=""),
        sa.Column("mobile", sa.Text, nullable=False, server_default=""),
        sa.Column("paygo_id", sa.Text, nullable=False, server_default=""),
        sa.Column("role", sa.String(32), nullable=False, server_default="viewer"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("project_name", sa.Text, nullable=False),
        sa.Column("client_name", sa.Text, nullable=False, server_default=""),
        sa.Column("start_date", sa.Text, nullable=False, server_default=""),
        sa.Column("estimated_budget", sa.Integer, nullable=False, server_default="0"),
        sa.Column("site_address", sa.Text, nullable=False, server_default=""),
        sa.Column("office_address", sa.Text, nullable=False, server_default=""),
        sa.Column("contact_number", sa.Text, nullable=False, server_default=""),
        sa.Column("location_link1", sa.Text, nullable=False, server_default=""),
        sa.Column("location_link2", sa.Text, nullable=False, server_default=""),
        sa.Column("note", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(16), nullable=False, server_default="Active"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_projects_project_name", "projects", ["project_name"])

    op.create_table(
        "contractors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("contractor_name", sa.Text, nullable=False),
        sa.Column("project", sa.Text, nullable=False, server_default=""),
        sa.Column("trade", sa.Text, nullable=False, server_default=""),
        sa.Column("date", sa.Text, nullable=False, server_default=""),
        sa.Column("unit", sa.Text, nullable=False, server_default=""),
        # Quantities and rates are exact decimal strings.
        sa.Column("unit_price", sa.Text, nullable=False, server_default="0"),
        sa.Column("estimated_qty", sa.Text, nullable=False, server_default="0"),
        sa.Column("estimated_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("mobile", sa.Text, nullable=False, server_default=""),
        sa.Column("email", sa.Text, nullable=False, server_default=""),
        sa.Column("address", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_contractors_contractor_name", "contractors", ["contractor_name"])

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("bill_number", sa.String(32), nullable=False, unique=True),
        sa.Column("project", sa.Text, nullable=False),
        sa.Column("contractor", sa.Text, nullable=False),
        sa.Column("project_date", sa.Text, nullable=False, server_default=""),
        sa.Column("trade", sa.Text, nullable=False, server_default=""),
        sa.Column("unit", sa.Text, nullable=False, server_default=""),
        sa.Column("unit_price", sa.Text, nullable=False, server_default="0"),
        sa.Column("quantity", sa.Text, nullable=False, server_default="0"),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.Text, nullable=False, server_default=""),
        sa.Column("authorized_engineer", sa.Text, nullable=False, server_default=""),
        *_stage_columns(),
    )

    op.create_table(
        "nmrs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("nmr_number", sa.String(32), nullable=False, unique=True),
        sa.Column("project", sa.Text, nullable=False),
        sa.Column("contractor", sa.Text, nullable=False),
        sa.Column("trade", sa.Text, nullable=False, server_default=""),
        sa.Column("engineer_name", sa.Text, nullable=False, server_default=""),
        sa.Column("week_start", sa.Text, nullable=False, server_default=""),
        sa.Column("week_end", sa.Text, nullable=False, server_default=""),
        *_stage_columns(),
    )

    op.create_table(
        "nmr_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nmr_id", sa.Integer, sa.ForeignKey("nmrs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entry_date", sa.Text, nullable=False, server_default=""),
        sa.Column("labour_type", sa.Text, nullable=False, server_default=""),
        sa.Column("persons", sa.Text, nullable=False),
        sa.Column("rate", sa.Text, nullable=False),
        sa.Column("hours", sa.Text, nullable=False),
        sa.Column("duty", sa.Text, nullable=False, server_default=""),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_nmr_entries_nmr_id", "nmr_entries", ["nmr_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("payment_id", sa.String(32), nullable=False, unique=True),
        sa.Column("bill_number", sa.String(32), nullable=False),
        sa.Column("payment_date", sa.Text, nullable=False, server_default=""),
        sa.Column("paid_amount", sa.Integer, nullable=False),
        sa.Column("project", sa.Text, nullable=False, server_default=""),
        sa.Column("contractor", sa.Text, nullable=False, server_default=""),
        sa.Column("bill_total", sa.Integer, nullable=False),
        sa.Column("balance", sa.Integer, nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_by", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_payments_bill_number", "payments", ["bill_number"])


def downgrade() -> None:
    op.drop_index("ix_payments_bill_number", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_nmr_entries_nmr_id", table_name="nmr_entries")
    op.drop_table("nmr_entries")
    op.drop_table("nmrs")
    op.drop_table("bills")
    op.drop_index("ix_contractors_contractor_name", table_name="contractors")
    op.drop_table("contractors")
    op.drop_index("ix_projects_project_name", table_name="projects")
    op.drop_table("projects")
    op.drop_table("users")
