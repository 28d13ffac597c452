"""Product ORM — catalogue record plus the denormalized like fields.

Invariants:
    - id is an opaque string primary key, immutable after creation
    - like_count == number of ProductLike rows for every committed state
    - like_count NULL means a legacy record that predates likes (read as 0)
    - version is bumped on every UPDATE (optimistic concurrency check)

Design Decisions:
    - LikeSet membership in its own table: composite PK forbids duplicate members
      and a user_id index serves the liked-by-user listing
    - version_id_col over a blind UPDATE ... SET like_count = like_count + 1:
      the membership check and the counter move together or not at all
    - likes relationship is selectin-loaded: membership is needed for every projection
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Float, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_likes.db.base import Base


class Product(Base):
    """Product aggregate root — owns its LikeSet."""
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    charity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    owner_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    quality: Mapped[str | None] = mapped_column(String(50), nullable=True)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    donation: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Like fields — written only by services/like_store.py
    like_count: Mapped[int | None] = mapped_column(
        Integer, nullable=True, default=0,
    )
    last_like_activity_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    likes: Mapped[list["ProductLike"]] = relationship(
        "ProductLike", back_populates="product",
        cascade="all, delete-orphan", lazy="selectin",
        passive_deletes=True,
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("ix_products_like_activity", "last_like_activity_at", "id"),
    )

    @property
    def liked_by_ids(self) -> frozenset[str]:
        """Read-only view of the LikeSet members."""
        return frozenset(like.user_id for like in self.likes or ())
