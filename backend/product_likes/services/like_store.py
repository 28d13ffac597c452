"""LikeStore — atomic, idempotent mutation of one product's LikeSet.

Invariants:
    - Read, membership check and write happen in ONE transaction per attempt
    - Already-member like / non-member unlike commits nothing (idempotent no-op)
    - like_count moves with the membership row or not at all; never below 0
    - Conflicts (stale version, duplicate member, serialization failure, locked
      database) roll back and retry; ResourceNotFoundError is never retried
    - Budget exhausted -> ConcurrencyError; any other DB failure -> DatabaseError

Design Decisions:
    - Row lock (SELECT ... FOR UPDATE) where the backend has one, plus the
      Product.version check everywhere: SQLite has no row locks, so the version
      is what catches the lost update there
    - Fresh session per attempt: no identity-map state survives a rollback
    - Exponential backoff with ±25% jitter: concurrent losers spread out
      instead of colliding again on the next attempt
"""

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from product_likes.core.domain_types import LikeAction, ProductId, UserId
from product_likes.core.errors import (
    ConcurrencyError, DatabaseError, ErrorContext, ResourceNotFoundError,
)
from product_likes.core.like_set import LikeSet
from product_likes.models.product import Product
from product_likes.models.product_like import ProductLike

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(exc: DBAPIError) -> str | None:
    for candidate in (exc.orig, getattr(exc.orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def is_conflict(exc: BaseException) -> bool:
    """True for failures caused by a concurrent writer on the same product."""
    if isinstance(exc, (StaleDataError, IntegrityError)):
        return True
    if isinstance(exc, DBAPIError):
        if _sqlstate(exc) in _CONFLICT_SQLSTATES:
            return True
        if isinstance(exc, OperationalError) and "database is locked" in str(exc.orig).lower():
            return True
    return False


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LikeStore:
    """Transactional read-modify-write over a product's (members, counter) pair."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_attempts: int = 5,
        base_delay_ms: int = 20,
        max_delay_ms: int = 1000,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._session_factory = session_factory
        self.max_attempts = max(1, max_attempts)
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._clock = clock

    async def add_like(self, product_id: ProductId, user_id: UserId) -> Product:
        return await self._mutate(LikeAction.LIKE, product_id, user_id)

    async def remove_like(self, product_id: ProductId, user_id: UserId) -> Product:
        return await self._mutate(LikeAction.UNLIKE, product_id, user_id)

    async def snapshot(self, product_id: ProductId) -> LikeSet:
        """Committed (members, counter) pair. Internal accessor for invariant checks."""
        try:
            async with self._session_factory() as db:
                product = await db.get(Product, product_id)
                if product is None:
                    raise ResourceNotFoundError("Product", product_id)
                return LikeSet.from_record(product.like_count, product.liked_by_ids)
        except SQLAlchemyError as e:
            logger.error(f"Snapshot of product {product_id} failed: {e}", exc_info=True)
            raise DatabaseError("Could not read like state", "query")

    # ─── Retry loop ─────────────────────────────────────────────

    async def _mutate(
        self, action: LikeAction, product_id: ProductId, user_id: UserId,
    ) -> Product:
        log_extra = {
            "product_id": product_id, "user_id": user_id, "action": action.value,
        }
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(action, product_id, user_id)
            except SQLAlchemyError as e:
                if not is_conflict(e):
                    logger.error(
                        f"{action.value} failed on product {product_id}: {e}",
                        extra={**log_extra, "attempt": attempt},
                        exc_info=True,
                    )
                    raise DatabaseError(
                        f"Could not {action.value} product", "commit",
                        ErrorContext(product_id=product_id, user_id=user_id, attempt=attempt),
                    )
                if attempt == self.max_attempts:
                    break
                delay_ms = self._backoff_ms(attempt)
                logger.info(
                    f"Conflict on product {product_id} ({type(e).__name__}), "
                    f"retrying in {delay_ms}ms",
                    extra={**log_extra, "attempt": attempt},
                )
                await asyncio.sleep(delay_ms / 1000)

        logger.warning(
            f"Retry budget exhausted for {action.value} on product {product_id}",
            extra={**log_extra, "attempt": self.max_attempts, "error_code": "CONCURRENCY_CONFLICT"},
        )
        raise ConcurrencyError(
            f"Too much contention on product '{product_id}', try again",
            attempts=self.max_attempts,
            retry_after_ms=self._backoff_ms(self.max_attempts),
            context=ErrorContext(product_id=product_id, user_id=user_id),
        )

    def _backoff_ms(self, attempt: int) -> int:
        delay = min(self.base_delay_ms * (2 ** (attempt - 1)), self.max_delay_ms)
        jitter = delay * 0.25
        return max(0, int(delay + random.uniform(-jitter, jitter)))

    # ─── Single transaction ─────────────────────────────────────

    async def _attempt(
        self, action: LikeAction, product_id: ProductId, user_id: UserId,
    ) -> Product:
        async with self._session_factory() as db:
            async with db.begin():
                product = await self._load_for_update(db, product_id)
                if product is None:
                    raise ResourceNotFoundError("Product", product_id)

                current = LikeSet.from_record(product.like_count, product.liked_by_ids)
                updated = current.apply(action, user_id)
                if updated is current:
                    logger.info(
                        f"{action.value} on product {product_id} is a no-op",
                        extra={"product_id": product_id, "user_id": user_id, "action": action.value},
                    )
                    return product

                self._write(product, action, user_id, updated)
            # commit happened on leaving begin(); a stale version raised there

        logger.info(
            f"{action.value} committed on product {product_id}",
            extra={
                "product_id": product_id, "user_id": user_id,
                "action": action.value, "like_count": product.like_count,
            },
        )
        return product

    async def _load_for_update(
        self, db: AsyncSession, product_id: ProductId,
    ) -> Product | None:
        result = await db.execute(
            select(Product).where(Product.id == product_id).with_for_update(),
        )
        return result.scalar_one_or_none()

    def _write(
        self,
        product: Product,
        action: LikeAction,
        user_id: UserId,
        updated: LikeSet,
    ) -> None:
        if action == LikeAction.LIKE:
            product.likes.append(ProductLike(user_id=user_id))
        else:
            for like in list(product.likes):
                if like.user_id == user_id:
                    product.likes.remove(like)
        product.like_count = updated.count
        product.last_like_activity_at = self._clock()
