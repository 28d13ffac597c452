"""LikeQueryIndex — products liked by a user, newest like activity first, cursor-paged.

Invariants:
    - Order is (activity DESC, id DESC): total, so pages never overlap
    - activity = last_like_activity_at, or the epoch for legacy rows that never
      recorded one; the same on every backend, so NULLs sort last everywhere
    - Each page is computed from the cursor alone (no server-side paging state)
    - Unknown or unreadable cursor restarts from the head (logged, not raised)
    - nextCursor is present iff at least one more matching row existed when the
      page was read

Design Decisions:
    - Keyset pagination anchored on the cursor product's CURRENT position: a
      product re-liked between pages may move; cross-page consistency is
      best-effort, not a snapshot
    - Fetch limit + 1 rows to decide nextCursor without a COUNT query
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_likes.core.cursor import decode_cursor, encode_cursor
from product_likes.core.domain_types import (
    Cursor, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, ProductId, UserId, clamp_page_limit,
)
from product_likes.core.errors import DatabaseError
from product_likes.models.product import Product
from product_likes.models.product_like import ProductLike

logger = logging.getLogger(__name__)

_NEVER_ACTIVE = datetime(1970, 1, 1, tzinfo=timezone.utc)

# sort key shared by ORDER BY, the keyset predicate and the anchor lookup
_activity = func.coalesce(Product.last_like_activity_at, _NEVER_ACTIVE)


@dataclass
class LikedPage:
    """One page of products liked by a user."""
    products: list[Product] = field(default_factory=list)
    next_cursor: Cursor | None = None


class LikeQueryIndex:
    """Paginated reverse lookup: user id -> products whose LikeSet contains it."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ):
        self._session_factory = session_factory
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def list_liked_by(
        self,
        user_id: UserId,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> LikedPage:
        page_size = clamp_page_limit(limit, self.default_limit, self.max_limit)
        try:
            async with self._session_factory() as db:
                stmt = (
                    select(Product)
                    .join(ProductLike, ProductLike.product_id == Product.id)
                    .where(ProductLike.user_id == user_id)
                    .order_by(_activity.desc(), Product.id.desc())
                    .limit(page_size + 1)
                )
                anchor = await self._resolve_anchor(db, cursor, user_id)
                if anchor is not None:
                    anchor_at, anchor_id = anchor
                    stmt = stmt.where(or_(
                        _activity < anchor_at,
                        and_(_activity == anchor_at, Product.id < anchor_id),
                    ))
                rows = list((await db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            logger.error(
                f"Liked-products query failed: {e}",
                extra={"user_id": user_id}, exc_info=True,
            )
            raise DatabaseError("Could not list liked products", "query")

        products = rows[:page_size]
        next_cursor = (
            encode_cursor(ProductId(products[-1].id))
            if len(rows) > page_size else None
        )
        return LikedPage(products=products, next_cursor=next_cursor)

    async def _resolve_anchor(
        self, db: AsyncSession, cursor: str | None, user_id: UserId,
    ):
        """(activity, id) of the cursor product, or None for head."""
        if cursor is None:
            return None
        product_id = decode_cursor(cursor)
        if product_id is None:
            logger.warning(
                "Unreadable cursor, restarting from head",
                extra={"user_id": user_id},
            )
            return None
        row = (await db.execute(
            select(_activity, Product.id).where(Product.id == product_id),
        )).one_or_none()
        if row is None:
            logger.warning(
                f"Cursor names unknown product {product_id}, restarting from head",
                extra={"user_id": user_id, "product_id": product_id},
            )
            return None
        return row[0], row[1]
