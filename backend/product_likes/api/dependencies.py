"""API Dependencies — caller identity and service wiring for route handlers.

Invariants:
    - get_current_user_id never returns None (raises UnauthenticatedError)
    - get_optional_user_id returns None only when no Authorization header is sent;
      a present-but-invalid credential still raises
    - LikeService is built on the live db_manager, so tests patch one place
    - Liked-page limits are checked against the configured maximum, not constants

Design Decisions:
    - Header() over a security scheme class: the identity provider is external,
      this layer only verifies and trusts the subject
"""

from fastapi import Depends, Header, Query
from fastapi.exceptions import RequestValidationError

from product_likes.config import get_settings
from product_likes.core.domain_types import MIN_PAGE_LIMIT, UserId
from product_likes.core.errors import UnauthenticatedError
from product_likes.infrastructure.database import get_db_manager
from product_likes.infrastructure.identity import TokenVerifier, extract_bearer_token
from product_likes.services.like_service import LikeService


def get_token_verifier() -> TokenVerifier:
    settings = get_settings()
    return TokenVerifier(
        settings.auth_secret, settings.auth_algorithm, settings.auth_audience,
    )


async def get_optional_user_id(
    authorization: str | None = Header(None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> UserId | None:
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    return verifier.verify(token)


async def get_current_user_id(
    user_id: UserId | None = Depends(get_optional_user_id),
) -> UserId:
    if user_id is None:
        raise UnauthenticatedError("missing bearer token")
    return user_id


def get_like_service() -> LikeService:
    return LikeService.from_settings(
        get_db_manager().session_factory, get_settings(),
    )


def get_liked_page_limit(
    limit: int | None = Query(None, ge=MIN_PAGE_LIMIT),
    service: LikeService = Depends(get_like_service),
) -> int | None:
    """Requested page size; None lets the index apply its configured default."""
    maximum = service.index.max_limit
    if limit is not None and limit > maximum:
        raise RequestValidationError([{
            "loc": ("query", "limit"),
            "msg": f"Input should be less than or equal to {maximum}",
            "type": "less_than_equal",
        }])
    return limit
