# This project was developed with assistance from AI tools.
"""add onboarding checklists

Revision ID: 3c1e9a7b2d40
Revises:
Create Date: 2026-10-12 09:15:42.310518

"""

import sqlalchemy as sa
from alembic import op

revision = "3c1e9a7b2d40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "onboarding_checklists",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("employee_user_id", sa.String(255), nullable=True),
        sa.Column("role", sa.String(100), nullable=False),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("template_version", sa.String(50), nullable=False),
        sa.Column("access_token", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="not_started"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
        sa.UniqueConstraint("access_token"),
    )
    op.create_index("ix_onboarding_checklists_employee_id", "onboarding_checklists", ["employee_id"])
    op.create_index(
        "ix_onboarding_checklists_employee_user_id", "onboarding_checklists", ["employee_user_id"]
    )
    op.create_index("ix_onboarding_checklists_department", "onboarding_checklists", ["department"])
    op.create_index("ix_onboarding_checklists_access_token", "onboarding_checklists", ["access_token"])

    op.create_table(
        "onboarding_checklist_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("checklist_id", sa.Integer(), nullable=False),
        sa.Column("template_key", sa.String(100), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("requires_document", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("document_kind", sa.String(10), nullable=True),
        sa.Column("requires_psychometric_test", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("psychometric_test_id", sa.Integer(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_by", sa.String(255), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("document_url", sa.String(1000), nullable=True),
        sa.Column("document_name", sa.String(255), nullable=True),
        sa.Column("document_uploaded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_document_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_by", sa.String(255), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        sa.Column("psychometric_test_attempt_id", sa.Integer(), nullable=True),
        sa.Column("psychometric_test_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("psychometric_test_score", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["checklist_id"], ["onboarding_checklists.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_onboarding_checklist_items_checklist_id", "onboarding_checklist_items", ["checklist_id"]
    )

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("prev_hash", sa.String(64), nullable=True),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("user_role", sa.String(50), nullable=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("checklist_id", sa.Integer(), nullable=True),
        sa.Column("item_id", sa.Integer(), nullable=True),
        sa.Column("event_data", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_events_event_type", "audit_events", ["event_type"])
    op.create_index("ix_audit_events_checklist_id", "audit_events", ["checklist_id"])


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("onboarding_checklist_items")
    op.drop_table("onboarding_checklists")
