"""ProductLike ORM — one LikeSet membership row per (product, user).

Invariants:
    - (product_id, user_id) is the primary key: a user likes a product at most once
    - Rows are removed with their product (ON DELETE CASCADE + delete-orphan)

Design Decisions:
    - created_at kept for auditing only; listing order uses
      products.last_like_activity_at
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_likes.db.base import Base


class ProductLike(Base):
    """Membership of a user in a product's LikeSet."""
    __tablename__ = "product_likes"

    product_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    product: Mapped["Product"] = relationship(
        "Product", back_populates="likes",
    )

    __table_args__ = (
        Index("ix_product_likes_user_id", "user_id"),
    )
