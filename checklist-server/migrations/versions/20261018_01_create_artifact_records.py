"""create artifact_records

Revision ID: 7c1e0a9d4b21
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7c1e0a9d4b21"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "artifact_records",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("checklist_type", sa.String(length=20), nullable=False),
        sa.Column("checklist_hash", sa.String(length=128), nullable=False),
        sa.Column("file_path", sa.String(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("meta", sa.Text(), nullable=False, server_default="{}"),
    )
    op.create_index("ix_artifact_records_checklist_type", "artifact_records", ["checklist_type"])
    op.create_index("ix_artifact_records_checklist_hash", "artifact_records", ["checklist_hash"], unique=True)
    op.create_index("ix_artifact_records_expires_at", "artifact_records", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_artifact_records_expires_at", table_name="artifact_records")
    op.drop_index("ix_artifact_records_checklist_hash", table_name="artifact_records")
    op.drop_index("ix_artifact_records_checklist_type", table_name="artifact_records")
    op.drop_table("artifact_records")
