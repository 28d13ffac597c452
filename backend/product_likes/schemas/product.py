"""Product Schemas — public, camelCase API contracts for product and like responses.

Invariants:
    - No schema here has a likedBy / liked_by field
    - extra="forbid": an ORM attribute can never ride along into a response
    - likeCount is validated >= 0 at the boundary

Design Decisions:
    - alias_generator=to_camel: wire format matches existing clients
      (likeCount, isLikedByUser, nextCursor); Python code stays snake_case
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _PublicModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )


class LikeStatus(_PublicModel):
    """Result of a like/unlike call."""
    like_count: int = Field(ge=0)
    is_liked_by_user: bool


class PublicProductView(_PublicModel):
    """Full product representation minus the membership set."""
    id: str
    name: str
    description: str | None = None
    category_id: str | None = None
    charity_id: str | None = None
    owner_id: str | None = None
    quality: str | None = None
    size: str | None = None
    images: list[str] = Field(default_factory=list)
    donation: float = 0.0
    price: float = 0.0
    quantity: int = 0
    like_count: int = Field(0, ge=0)
    is_liked_by_user: bool = False
    last_like_activity_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OffsetPagination(_PublicModel):
    limit: int
    offset: int


class ProductListResponse(_PublicModel):
    products: list[PublicProductView]
    pagination: OffsetPagination


class LikedProductsPage(_PublicModel):
    """One page of the caller's liked products."""
    products: list[PublicProductView]
    next_cursor: str | None = None
