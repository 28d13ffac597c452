"""Pagination Cursor — opaque token naming the last item of the previous page.

Invariants:
    - encode_cursor(id) round-trips through decode_cursor
    - decode_cursor never raises: garbage in -> None (caller restarts from head)

Design Decisions:
    - Pointer to the last item, not a numeric offset: inserts/removals elsewhere
      do not shift the page boundary
    - URL-safe base64 without padding: safe in a query string, not human-guessable
"""

import base64
import binascii

from product_likes.core.domain_types import Cursor, ProductId

_MAX_CURSOR_LENGTH = 256


def encode_cursor(product_id: ProductId) -> Cursor:
    raw = base64.urlsafe_b64encode(product_id.encode("utf-8"))
    return Cursor(raw.rstrip(b"=").decode("ascii"))


def decode_cursor(cursor: str | None) -> ProductId | None:
    """Return the product id inside cursor, or None if it is absent or unreadable."""
    if not cursor or len(cursor) > _MAX_CURSOR_LENGTH:
        return None
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None
    if not decoded or not decoded.isprintable():
        return None
    return ProductId(decoded)
