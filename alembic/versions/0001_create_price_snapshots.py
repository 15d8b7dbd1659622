"""create price_snapshots table

Revision ID: 0001_create_price_snapshots
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_price_snapshots"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "price_snapshots",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("external_id", sa.String(length=64), nullable=True),
        sa.Column("asset_key", sa.String(length=80), nullable=False),
        sa.Column("symbol", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("market_cap", sa.Float(), nullable=True),
        sa.Column("volume_24h", sa.Float(), nullable=True),
        sa.Column("percent_change_1h", sa.Float(), nullable=True),
        sa.Column("percent_change_24h", sa.Float(), nullable=True),
        sa.Column("percent_change_7d", sa.Float(), nullable=True),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("currency", sa.String(length=10), nullable=False),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_price_snapshots_external_id", "price_snapshots", ["external_id"])
    op.create_index("ix_price_snapshots_symbol", "price_snapshots", ["symbol"])
    op.create_index("ix_price_snapshots_asset_key_id", "price_snapshots", ["asset_key", "id"])
    op.create_index("ix_price_snapshots_observed_at", "price_snapshots", ["observed_at"])


def downgrade() -> None:
    op.drop_index("ix_price_snapshots_observed_at", table_name="price_snapshots")
    op.drop_index("ix_price_snapshots_asset_key_id", table_name="price_snapshots")
    op.drop_index("ix_price_snapshots_symbol", table_name="price_snapshots")
    op.drop_index("ix_price_snapshots_external_id", table_name="price_snapshots")
    op.drop_table("price_snapshots")
