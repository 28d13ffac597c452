"""LikeSet — immutable value for a product's (members, counter) pair.

Invariants:
    - with_member / without_member return the SAME instance when nothing changes
      (callers use identity to detect the idempotent no-op path)
    - count never drops below 0, even when the prior state was inconsistent
    - from_record never raises: missing fields read as 0 / empty set

Design Decisions:
    - Pure value object: LikeStore loads the record, computes the transition
      here, then writes the result back (ADR: impureim sandwich)
    - The stored counter is trusted as-is on read; only transitions adjust it
"""

from collections.abc import Iterable
from dataclasses import dataclass

from product_likes.core.domain_types import LikeAction, UserId


@dataclass(frozen=True)
class LikeSet:
    """Set of user ids currently liking a product, plus its cached cardinality."""
    members: frozenset[str] = frozenset()
    count: int = 0

    @classmethod
    def from_record(
        cls, like_count: int | None, members: Iterable[str] | None,
    ) -> "LikeSet":
        """Build from stored fields; legacy records may lack either."""
        return cls(
            members=frozenset(members or ()),
            count=max(0, like_count or 0),
        )

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.members

    @property
    def is_consistent(self) -> bool:
        return self.count == len(self.members)

    def with_member(self, user_id: UserId) -> "LikeSet":
        if user_id in self.members:
            return self
        return LikeSet(self.members | {user_id}, self.count + 1)

    def without_member(self, user_id: UserId) -> "LikeSet":
        if user_id not in self.members:
            return self
        return LikeSet(self.members - {user_id}, max(0, self.count - 1))

    def apply(self, action: LikeAction, user_id: UserId) -> "LikeSet":
        if action == LikeAction.LIKE:
            return self.with_member(user_id)
        return self.without_member(user_id)
