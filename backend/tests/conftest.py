"""Root conftest — shared fixtures: file-backed SQLite per test, stores, HTTP client, tokens.

Invariants:
    - Every test gets a fresh database file under tmp_path
    - get_db dependency overridden and db_manager patched to the test engine
    - Environment is set before any product_likes module reads settings

Design Decisions:
    - File-backed SQLite over :memory:: concurrent sessions need separate
      connections to exercise real write conflicts
    - Tests never touch PostgreSQL; row locks (FOR UPDATE) are a no-op here and
      the version check carries the concurrency tests
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.setdefault("LIKE_BASE_DELAY_MS", "1")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402

import product_likes.infrastructure.database as db_module  # noqa: E402
from product_likes.db.base import Base  # noqa: E402
from product_likes.db.session import build_engine, create_session_factory  # noqa: E402
from product_likes.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, get_db,
)
from product_likes.main import app  # noqa: E402
from product_likes.models.product import Product  # noqa: E402
from product_likes.models.product_like import ProductLike  # noqa: E402
from product_likes.services.like_query_index import LikeQueryIndex  # noqa: E402
from product_likes.services.like_store import LikeStore  # noqa: E402

TEST_SECRET = os.environ["AUTH_SECRET"]


@pytest.fixture
async def test_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'likes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def make_product(test_session_factory):
    """Insert a product; liked_by seeds membership rows without touching like_count."""

    async def _make(
        name: str = "Test product",
        like_count: int | None = 0,
        liked_by: tuple[str, ...] = (),
        **fields,
    ) -> Product:
        async with test_session_factory() as db:
            product = Product(name=name, like_count=like_count, **fields)
            db.add(product)
            await db.flush()
            for user_id in liked_by:
                db.add(ProductLike(product_id=product.id, user_id=user_id))
            await db.commit()
            return product

    return _make


class StepClock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self):
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.fixture
def store(test_session_factory):
    return LikeStore(
        test_session_factory,
        max_attempts=5, base_delay_ms=1, max_delay_ms=10,
        clock=StepClock(),
    )


@pytest.fixture
def index(test_session_factory):
    return LikeQueryIndex(test_session_factory)


@pytest.fixture
def token_for():
    def _token(user_id: str, **claims) -> str:
        return jwt.encode({"sub": user_id, **claims}, TEST_SECRET, algorithm="HS256")
    return _token


@pytest.fixture
def auth_headers(token_for):
    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user_id)}"}
    return _headers


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # LikeService builds on db_manager.session_factory
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
