"""Error Hierarchy — verifies codes, statuses and the REST envelope.

Tests:
    - Each error class maps to its HTTP status and code
    - Only ConcurrencyError is retryable
    - to_response() carries product_id and retry hint, never user_id
"""

from product_likes.core.errors import (
    ConcurrencyError, DatabaseError, ErrorCategory, ErrorContext,
    LikesError, ResourceNotFoundError, UnauthenticatedError,
)


def test_unauthenticated_is_401_not_retryable():
    err = UnauthenticatedError("missing bearer token")
    assert err.http_status == 401
    assert err.code == "UNAUTHENTICATED"
    assert err.category == ErrorCategory.AUTHENTICATION
    assert not err.retryable
    assert "missing bearer token" in err.message


def test_not_found_records_product_id():
    err = ResourceNotFoundError("Product", "p9")
    assert err.http_status == 404
    assert err.context.product_id == "p9"
    assert err.message == "Product 'p9' not found"


def test_concurrency_error_is_retryable_503():
    err = ConcurrencyError("busy", attempts=5, retry_after_ms=800)
    assert err.http_status == 503
    assert err.retryable
    assert err.attempts == 5
    assert err.context.retry_after_ms == 800


def test_database_error_is_500():
    err = DatabaseError("connection reset", "commit")
    assert err.http_status == 500
    assert err.message == "Database commit failed: connection reset"
    assert not err.retryable


def test_all_errors_share_base():
    for err in (
        UnauthenticatedError("x"),
        ResourceNotFoundError("Product", "p"),
        ConcurrencyError("x", attempts=1),
        DatabaseError("x", "query"),
    ):
        assert isinstance(err, LikesError)


def test_response_envelope_shape():
    ctx = ErrorContext(product_id="p1", user_id="u1")
    body = ConcurrencyError("busy", attempts=3, retry_after_ms=100, context=ctx).to_response()
    error = body["error"]
    assert error["code"] == "CONCURRENCY_CONFLICT"
    assert error["category"] == "conflict"
    assert error["severity"] == "warning"
    assert error["context"] == {"product_id": "p1", "retry_after_ms": 100}
    assert "u1" not in str(body)
