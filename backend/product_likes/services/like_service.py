"""LikeService — public like/unlike/list operations over LikeStore and LikeQueryIndex.

Invariants:
    - like/unlike surface ResourceNotFoundError for an unknown product
      (checked inside the store's transaction, not before it)
    - list_liked_by_user never raises for a user with no likes (empty page)

Design Decisions:
    - Facade stays thin: transactions live in LikeStore, paging in LikeQueryIndex
    - Built per request from the session manager's factory (cheap, stateless)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_likes.config import Settings
from product_likes.core.domain_types import ProductId, UserId
from product_likes.models.product import Product
from product_likes.services.like_query_index import LikedPage, LikeQueryIndex
from product_likes.services.like_store import LikeStore

logger = logging.getLogger(__name__)


class LikeService:
    """Orchestrates LikeStore and LikeQueryIndex."""

    def __init__(self, store: LikeStore, index: LikeQueryIndex):
        self.store = store
        self.index = index

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
    ) -> "LikeService":
        store = LikeStore(
            session_factory,
            max_attempts=settings.like_max_attempts,
            base_delay_ms=settings.like_base_delay_ms,
            max_delay_ms=settings.like_max_delay_ms,
        )
        index = LikeQueryIndex(
            session_factory,
            default_limit=settings.liked_page_default_limit,
            max_limit=settings.liked_page_max_limit,
        )
        return cls(store, index)

    async def like(self, product_id: ProductId, user_id: UserId) -> Product:
        return await self.store.add_like(product_id, user_id)

    async def unlike(self, product_id: ProductId, user_id: UserId) -> Product:
        return await self.store.remove_like(product_id, user_id)

    async def list_liked_by_user(
        self,
        user_id: UserId,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> LikedPage:
        page = await self.index.list_liked_by(user_id, limit=limit, cursor=cursor)
        logger.debug(
            f"Listed {len(page.products)} liked products",
            extra={"user_id": user_id},
        )
        return page
