"""dentists, patients, appointments with active-slot unique index

Revision ID: 0001
Revises:
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_SQL = sa.text("status IN ('pending', 'confirmed')")


def upgrade():
    op.create_table(
        "dentists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("specialty", sa.Text()),
        sa.Column("availability_label", sa.Text()),
        sa.Column("rating", sa.Float()),
        sa.Column("photo_url", sa.Text()),
        sa.Column("is_active", sa.Integer(), server_default=sa.text("1")),
        sa.Column("created_at", sa.Text(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_table(
        "patients",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("full_name", sa.Text()),
        sa.Column("email", sa.Text(), unique=True),
        sa.Column("created_at", sa.Text(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.Text(), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("dentist_id", sa.Integer(), sa.ForeignKey("dentists.id"), nullable=False),
        sa.Column("dentist_name", sa.Text(), nullable=False),
        sa.Column("start_at", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("service_type", sa.Text(), nullable=False),
        sa.Column("service_name", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("amount_minor", sa.Integer()),
        sa.Column("currency", sa.Text()),
        sa.Column("created_at", sa.Text(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index(
        "uq_appointments_active_slot",
        "appointments",
        ["dentist_id", "start_at"],
        unique=True,
        sqlite_where=ACTIVE_SQL,
        postgresql_where=ACTIVE_SQL,
    )
    op.create_index("ix_appointments_patient_start", "appointments", ["patient_id", "start_at"])


def downgrade():
    op.drop_index("ix_appointments_patient_start", table_name="appointments")
    op.drop_index("uq_appointments_active_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("patients")
    op.drop_table("dentists")
