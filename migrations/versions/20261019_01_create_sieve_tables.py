"""create sieve script and quota tables

Revision ID: 5c0d1e2f3a4b
Revises: 
Create Date: 2026-10-19 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c0d1e2f3a4b"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sieve_scripts",
        sa.Column("owner", sa.String(length=100), primary_key=True),
        sa.Column("name", sa.String(length=255), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("activated_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "uq_sieve_scripts_single_active",
        "sieve_scripts",
        ["owner"],
        unique=True,
        sqlite_where=sa.text("is_active"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "sieve_quotas",
        sa.Column("owner", sa.String(length=100), primary_key=True),
        sa.Column("limit_bytes", sa.BigInteger(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("sieve_quotas")

    op.drop_index("uq_sieve_scripts_single_active", table_name="sieve_scripts")
    op.drop_table("sieve_scripts")
