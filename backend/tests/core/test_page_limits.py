"""Domain Types — verifies page-limit bounds and the LikeAction enum.

Tests:
    - Missing limit resolves to the default (20)
    - Limits are clamped into [1, 100]
    - LikeAction values serialize to plain strings
"""

import pytest

from product_likes.core.domain_types import (
    DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, LikeAction, clamp_page_limit,
)


def test_default_limit_is_twenty():
    assert DEFAULT_PAGE_LIMIT == 20
    assert clamp_page_limit(None) == 20


def test_max_limit_is_one_hundred():
    assert MAX_PAGE_LIMIT == 100


@pytest.mark.parametrize("requested,expected", [
    (0, 1), (-5, 1), (1, 1), (50, 50), (100, 100), (101, 100), (10_000, 100),
])
def test_limit_is_clamped(requested, expected):
    assert clamp_page_limit(requested) == expected


def test_custom_bounds():
    assert clamp_page_limit(None, default=5, maximum=10) == 5
    assert clamp_page_limit(50, default=5, maximum=10) == 10


def test_like_action_values():
    assert LikeAction.LIKE.value == "like"
    assert LikeAction.UNLIKE.value == "unlike"
    assert set(LikeAction) == {LikeAction.LIKE, LikeAction.UNLIKE}
