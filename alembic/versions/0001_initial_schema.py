"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

# enum columns are stored as VARCHAR (non-native enums)
ENUM = sa.String(length=32)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=100), nullable=False, unique=True, index=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", ENUM, nullable=False, index=True),
        sa.Column("role_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column("wallet_address", sa.String(length=42), nullable=True, index=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_suspended", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("role_tx_hash", sa.String(length=80), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "cases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("case_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("case_number", sa.String(length=100), nullable=True, index=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("priority", ENUM, nullable=False),
        sa.Column("police_station", sa.String(length=255), nullable=True),
        sa.Column("status", ENUM, nullable=False, index=True),
        sa.Column("is_draft", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("registered_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("assigned_forensic_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True),
        sa.Column("assigned_judge_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True),
        sa.Column("approved_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("blockchain_case_id", sa.String(length=80), nullable=True),
        sa.Column("blockchain_tx_hash", sa.String(length=80), nullable=True),
        sa.Column("approval_tx_hash", sa.String(length=80), nullable=True),
        sa.Column("transfer_status", ENUM, nullable=True),
        sa.Column("transfer_to_station", sa.String(length=255), nullable=True),
        sa.Column("transfer_reason", sa.Text(), nullable=True),
        sa.Column("transfer_requested_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("transfer_requested_at", sa.DateTime(), nullable=True),
        sa.Column("transfer_decided_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("transfer_decided_at", sa.DateTime(), nullable=True),
        sa.Column("transfer_decision_note", sa.Text(), nullable=True),
        sa.Column("verdict_decision", ENUM, nullable=True),
        sa.Column("verdict_summary", sa.Text(), nullable=True),
        sa.Column("verdict_html", sa.Text(), nullable=True),
        sa.Column("verdict_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("verdict_at", sa.DateTime(), nullable=True),
        sa.Column("verdict_tx_hash", sa.String(length=80), nullable=True),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, index=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )

    op.create_table(
        "case_timeline",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("status", ENUM, nullable=False),
        sa.Column("event", sa.String(length=64), nullable=False),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "hearings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("scheduled_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "evidence",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("evidence_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("evidence_type", ENUM, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("uploaded_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(length=255), nullable=True),
        sa.Column("content_hash", sa.String(length=128), nullable=False, index=True),
        sa.Column("gateway_url", sa.String(length=500), nullable=True),
        sa.Column("content_uri", sa.String(length=500), nullable=True),
        sa.Column("sha256", sa.String(length=64), nullable=False, index=True),
        sa.Column("status", ENUM, nullable=False),
        sa.Column("analysis_status", ENUM, nullable=False),
        sa.Column("analyzed_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("analysis_report", sa.Text(), nullable=True),
        sa.Column("analysis_notes", sa.Text(), nullable=True),
        sa.Column("analyzed_at", sa.DateTime(), nullable=True),
        sa.Column("is_immutable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("availability_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("availability_checked_at", sa.DateTime(), nullable=True),
        sa.Column("tamper_detected_at", sa.DateTime(), nullable=True),
        sa.Column("tamper_reason", sa.Text(), nullable=True),
        sa.Column("blockchain_tx_hash", sa.String(length=80), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False, index=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )

    op.create_table(
        "custody_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("evidence_pk", sa.Integer(), sa.ForeignKey("evidence.id"), nullable=False, index=True),
        sa.Column("action", ENUM, nullable=False),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("actor_role", sa.String(length=32), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("hash", sa.String(length=64), nullable=True),
    )

    op.create_table(
        "investigation_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("note_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("is_confidential", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "suspects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("suspect_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", ENUM, nullable=False),
        sa.Column("arrest_date", sa.DateTime(), nullable=True),
        sa.Column("release_date", sa.DateTime(), nullable=True),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "witnesses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("witness_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False, index=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("contact", sa.String(length=255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("statement", sa.Text(), nullable=False),
        sa.Column("reliability", ENUM, nullable=False),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("log_id", sa.String(length=64), nullable=False, unique=True, index=True),
        sa.Column("performed_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True),
        sa.Column("performed_by_role", sa.String(length=32), nullable=True),
        sa.Column("action", ENUM, nullable=False, index=True),
        sa.Column("case_pk", sa.Integer(), sa.ForeignKey("cases.id"), nullable=True, index=True),
        sa.Column("resource_id", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("attributes", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("timestamp", sa.DateTime(), nullable=False, index=True),
    )

    op.create_table(
        "job_runs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("job_type", sa.String(length=50), nullable=False, index=True),
        sa.Column("status", sa.String(length=20), nullable=False, index=True),
        sa.Column("started_at", sa.DateTime(), nullable=False, index=True),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("metrics", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("attributes", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
    )


def downgrade() -> None:
    for table in (
        "job_runs",
        "activity_logs",
        "witnesses",
        "suspects",
        "investigation_notes",
        "custody_entries",
        "evidence",
        "hearings",
        "case_timeline",
        "cases",
        "users",
    ):
        op.drop_table(table)
