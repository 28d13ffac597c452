"""Product Routes — product reads with like status, like/unlike, liked-by-me listing.

Invariants:
    - Every response body goes through core/projection.py (no likedBy, ever)
    - like/unlike/liked-listing require an identity; product reads accept anonymous
    - /products/user/liked is declared before /products/{product_id}

Design Decisions:
    - Reads use the request-scoped get_db session; writes go through LikeService,
      which owns its own transactions and retries
    - get_product_or_404 raises the domain error; the global handler renders it
"""

import logging

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from product_likes.api.dependencies import (
    get_current_user_id, get_like_service, get_liked_page_limit,
    get_optional_user_id,
)
from product_likes.core.domain_types import ProductId, UserId
from product_likes.core.errors import ResourceNotFoundError
from product_likes.core.projection import (
    project_like_status, project_product, project_products,
)
from product_likes.infrastructure.database import get_db
from product_likes.models.product import Product
from product_likes.schemas.product import (
    LikedProductsPage, LikeStatus, OffsetPagination,
    ProductListResponse, PublicProductView,
)
from product_likes.services.like_service import LikeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])

ProductIdPath = Path(min_length=1, max_length=64)


async def get_product_or_404(product_id: str, db: AsyncSession) -> Product:
    """Get product or raise ResourceNotFoundError."""
    product = await db.get(Product, product_id)
    if product is None:
        raise ResourceNotFoundError("Product", product_id)
    return product


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    viewer_id: UserId | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List products with like status for the (optional) viewer."""
    result = await db.execute(
        select(Product)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .offset(offset),
    )
    products = result.scalars().all()
    return ProductListResponse(
        products=project_products(list(products), viewer_id),
        pagination=OffsetPagination(limit=limit, offset=offset),
    )


@router.get("/user/liked", response_model=LikedProductsPage)
async def list_liked_products(
    user_id: UserId = Depends(get_current_user_id),
    cursor: str | None = Query(None, max_length=256),
    limit: int | None = Depends(get_liked_page_limit),
    service: LikeService = Depends(get_like_service),
):
    """Products liked by the caller, most recent like activity first."""
    page = await service.list_liked_by_user(user_id, limit=limit, cursor=cursor)
    return LikedProductsPage(
        products=project_products(page.products, user_id),
        next_cursor=page.next_cursor,
    )


@router.get("/{product_id}", response_model=PublicProductView)
async def get_product(
    product_id: str = ProductIdPath,
    viewer_id: UserId | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get one product with like status for the (optional) viewer."""
    product = await get_product_or_404(product_id, db)
    return project_product(product, viewer_id)


@router.post("/{product_id}/like", response_model=LikeStatus)
async def like_product(
    product_id: str = ProductIdPath,
    user_id: UserId = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
):
    """Like a product. Repeating the call changes nothing."""
    product = await service.like(ProductId(product_id), user_id)
    return project_like_status(product, user_id)


@router.delete("/{product_id}/like", response_model=LikeStatus)
async def unlike_product(
    product_id: str = ProductIdPath,
    user_id: UserId = Depends(get_current_user_id),
    service: LikeService = Depends(get_like_service),
):
    """Remove the caller's like. Unliking a product never liked changes nothing."""
    product = await service.unlike(ProductId(product_id), user_id)
    return project_like_status(product, user_id)
