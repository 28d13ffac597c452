"""Add like fields to products and the product_likes membership table.

Revision ID: 002_product_likes
Revises: 001_products
Create Date: 2026-10-05

like_count is added nullable with no backfill: existing rows keep NULL and
are read as 0 until their first like.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_product_likes"
down_revision: Union[str, None] = "001_products"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("products") as batch:
        batch.add_column(sa.Column("like_count", sa.Integer(), nullable=True))
        batch.add_column(
            sa.Column("last_like_activity_at", sa.DateTime(timezone=True), nullable=True),
        )
        batch.add_column(
            sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        )
    op.create_index(
        "ix_products_like_activity", "products", ["last_like_activity_at", "id"],
    )

    op.create_table(
        "product_likes",
        sa.Column(
            "product_id", sa.String(64),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_product_likes_user_id", "product_likes", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_product_likes_user_id", table_name="product_likes")
    op.drop_table("product_likes")
    op.drop_index("ix_products_like_activity", table_name="products")
    with op.batch_alter_table("products") as batch:
        batch.drop_column("version")
        batch.drop_column("last_like_activity_at")
        batch.drop_column("like_count")
