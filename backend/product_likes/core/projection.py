"""Response Projector — maps a product record to what a given viewer may see.

Invariants:
    - Output never carries the membership set, for any viewer (privacy rule)
    - likeCount = stored counter, 0 when the record predates likes
    - isLikedByUser = False without a viewer; else viewer in likedBy
      (False when the record has no membership data)

Design Decisions:
    - Pure functions over duck-typed records: reads attributes only, never
      triggers IO, works for legacy rows with missing like fields
    - Membership is only used to compute a boolean; the set itself is dropped here
"""

from typing import Any

from product_likes.schemas.product import LikeStatus, PublicProductView

_PUBLIC_FIELDS = (
    "id", "name", "description", "category_id", "charity_id", "owner_id",
    "quality", "size", "images", "donation", "price", "quantity",
    "last_like_activity_at", "created_at", "updated_at",
)


def like_count_of(product: Any) -> int:
    return max(0, getattr(product, "like_count", None) or 0)


def is_liked_by(product: Any, viewer_id: str | None) -> bool:
    if viewer_id is None:
        return False
    members = getattr(product, "liked_by_ids", None)
    if not members:
        return False
    return viewer_id in members


def project_product(product: Any, viewer_id: str | None = None) -> PublicProductView:
    """Public view of product for viewer_id (None = anonymous)."""
    fields = {
        name: getattr(product, name)
        for name in _PUBLIC_FIELDS
        if getattr(product, name, None) is not None
    }
    return PublicProductView(
        **fields,
        like_count=like_count_of(product),
        is_liked_by_user=is_liked_by(product, viewer_id),
    )


def project_products(
    products: list[Any], viewer_id: str | None = None,
) -> list[PublicProductView]:
    return [project_product(p, viewer_id) for p in products]


def project_like_status(product: Any, viewer_id: str) -> LikeStatus:
    return LikeStatus(
        like_count=like_count_of(product),
        is_liked_by_user=is_liked_by(product, viewer_id),
    )
