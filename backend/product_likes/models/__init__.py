"""ORM Models — SQLAlchemy declarative models for the like subsystem.

Invariants:
    - All models inherit from Base (db/base.py)
    - Product is the aggregate root; ProductLike rows live and die with it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from product_likes.models.product import Product  # noqa: F401
from product_likes.models.product_like import ProductLike  # noqa: F401
