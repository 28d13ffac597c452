"""LikeService — verifies settings wiring and delegation to store and index."""

from product_likes.config import Settings
from product_likes.services.like_service import LikeService


def test_from_settings_applies_retry_and_paging(test_session_factory):
    settings = Settings(
        like_max_attempts=7, like_base_delay_ms=5, like_max_delay_ms=50,
        liked_page_default_limit=10, liked_page_max_limit=40,
    )

    service = LikeService.from_settings(test_session_factory, settings)

    assert service.store.max_attempts == 7
    assert service.store.base_delay_ms == 5
    assert service.store.max_delay_ms == 50
    assert service.index.default_limit == 10
    assert service.index.max_limit == 40


async def test_like_unlike_and_list(store, index, make_product):
    service = LikeService(store, index)
    product = await make_product()

    liked = await service.like(product.id, "u1")
    assert liked.like_count == 1

    page = await service.list_liked_by_user("u1")
    assert [p.id for p in page.products] == [product.id]

    unliked = await service.unlike(product.id, "u1")
    assert unliked.like_count == 0
    assert (await service.list_liked_by_user("u1")).products == []
