"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId and UserId are opaque strings — never parsed, never compared by prefix
    - LikeAction enumerates the only two mutations allowed on a LikeSet
    - Page limits are bounded [MIN_PAGE_LIMIT, MAX_PAGE_LIMIT]

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ProductId = NewType("ProductId", str)
UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

Cursor = NewType("Cursor", str)  # opaque, see core/cursor.py

DEFAULT_PAGE_LIMIT = 20
MIN_PAGE_LIMIT = 1
MAX_PAGE_LIMIT = 100


# ─── Enums ───────────────────────────────────────────────────────

class LikeAction(str, Enum):
    """The two LikeSet mutations. Both are idempotent."""
    LIKE = "like"
    UNLIKE = "unlike"


def clamp_page_limit(
    limit: int | None,
    default: int = DEFAULT_PAGE_LIMIT,
    maximum: int = MAX_PAGE_LIMIT,
) -> int:
    """Resolve a requested page size to the bounded range."""
    if limit is None:
        return default
    return max(MIN_PAGE_LIMIT, min(limit, maximum))
