"""create_sales_tables

Revision ID: 3c9e1f2a7b40
Revises:
Create Date: 2026-10-16 09:12:31.504117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c9e1f2a7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sales_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("upc", sa.Text(), nullable=False, server_default=""),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("qty", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("category", sa.String(16), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("discount_percent", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("branch", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint("qty >= 1", name="sales_entry_qty_positive"),
        sa.CheckConstraint("price >= 0", name="sales_entry_price_non_negative"),
        sa.CheckConstraint(
            "discount_percent >= 0 AND discount_percent <= 100",
            name="sales_entry_discount_range",
        ),
    )
    op.create_index("ix_sales_entries_owner_date", "sales_entries", ["owner_id", "date"])
    op.create_index("ix_sales_entries_branch", "sales_entries", ["branch"])

    op.create_table(
        "collection_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("upc", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("owner_id", "upc", name="uq_collection_items_owner_upc"),
    )
    op.create_index("ix_collection_items_owner_id", "collection_items", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_collection_items_owner_id", table_name="collection_items")
    op.drop_table("collection_items")
    op.drop_index("ix_sales_entries_branch", table_name="sales_entries")
    op.drop_index("ix_sales_entries_owner_date", table_name="sales_entries")
    op.drop_table("sales_entries")
