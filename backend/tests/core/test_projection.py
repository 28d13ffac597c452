"""Response Projector — verifies the privacy rule and viewer-relative like status.

Invariants:
    - Serialized output never has a likedBy key, for any viewer
    - Anonymous viewers always see isLikedByUser = false
    - Legacy records (no like fields) project as likeCount 0, not liked
"""

from types import SimpleNamespace

from product_likes.core.projection import (
    is_liked_by, like_count_of, project_like_status, project_product, project_products,
)


def _product(**overrides):
    fields = {
        "id": "p1", "name": "Lamp", "description": "Desk lamp",
        "images": ["a.png"], "price": 10.0, "quantity": 2,
        "like_count": 2, "liked_by_ids": frozenset({"u1", "u2"}),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_liked_by_is_never_serialized():
    for viewer in (None, "u1", "stranger"):
        body = project_product(_product(), viewer).model_dump(by_alias=True)
        assert "likedBy" not in body
        assert "liked_by_ids" not in body
        assert "liked_by" not in body


def test_viewer_in_set_sees_liked():
    view = project_product(_product(), "u1")
    assert view.is_liked_by_user is True
    assert view.like_count == 2


def test_viewer_not_in_set_sees_not_liked():
    assert project_product(_product(), "u3").is_liked_by_user is False


def test_anonymous_viewer_sees_not_liked():
    view = project_product(_product(), None)
    assert view.is_liked_by_user is False
    assert view.like_count == 2


def test_legacy_record_without_like_fields():
    legacy = SimpleNamespace(id="old", name="Chair")
    view = project_product(legacy, "u1")
    assert view.like_count == 0
    assert view.is_liked_by_user is False


def test_null_counter_reads_as_zero():
    assert like_count_of(_product(like_count=None)) == 0


def test_negative_counter_reads_as_zero():
    assert like_count_of(_product(like_count=-1)) == 0


def test_is_liked_by_empty_membership():
    assert is_liked_by(_product(liked_by_ids=frozenset()), "u1") is False


def test_wire_format_is_camel_case():
    body = project_product(_product(), "u1").model_dump(by_alias=True)
    assert body["likeCount"] == 2
    assert body["isLikedByUser"] is True
    assert body["images"] == ["a.png"]


def test_project_products_keeps_order():
    views = project_products([_product(id="a"), _product(id="b")], "u1")
    assert [v.id for v in views] == ["a", "b"]


def test_like_status_has_only_count_and_flag():
    body = project_like_status(_product(), "u2").model_dump(by_alias=True)
    assert body == {"likeCount": 2, "isLikedByUser": True}
