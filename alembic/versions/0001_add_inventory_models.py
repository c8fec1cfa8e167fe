"""add restaurant, inventory item and consumption history tables

Revision ID: 0001
Revises:
Create Date: 2025-03-01 00:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "restaurant",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
    )

    op.create_table(
        "inventory_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurant.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("current_stock", sa.Float(), nullable=False),
        sa.Column("min_stock", sa.Float(), nullable=False),
        sa.Column("max_stock", sa.Float(), nullable=True),
        sa.Column("cost_per_unit", sa.Float(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_inventory_item_restaurant_id", "inventory_item", ["restaurant_id"])

    op.create_table(
        "consumption_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurant.id"), nullable=False),
        sa.Column(
            "item_id",
            sa.Integer(),
            sa.ForeignKey("inventory_item.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
    )
    op.create_index("ix_consumption_history_restaurant_id", "consumption_history", ["restaurant_id"])
    op.create_index("ix_consumption_history_date", "consumption_history", ["date"])


def downgrade() -> None:
    op.drop_index("ix_consumption_history_date", table_name="consumption_history")
    op.drop_index("ix_consumption_history_restaurant_id", table_name="consumption_history")
    op.drop_table("consumption_history")
    op.drop_index("ix_inventory_item_restaurant_id", table_name="inventory_item")
    op.drop_table("inventory_item")
    op.drop_table("restaurant")
