"""Shared fixtures."""

import itertools

import pytest
from httpx import ASGITransport, AsyncClient

from snackify.dependencies import get_comment_store, get_rating_store
from snackify.main import app
from snackify.stores.comments import CommentStore
from snackify.stores.kv import MemoryStorage
from snackify.stores.ratings import RatingStore


@pytest.fixture
def clock():
    """Deterministic millisecond clock: 1700000000000, +1000 per call."""
    ticks = itertools.count(1_700_000_000_000, 1000)
    return lambda: next(ticks)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, clock) -> RatingStore:
    return RatingStore(storage, clock=clock)


@pytest.fixture
def comment_store(storage: MemoryStorage, clock) -> CommentStore:
    return CommentStore(storage, clock=clock)


@pytest.fixture
async def client(store: RatingStore, comment_store: CommentStore):
    """Create test client backed by in-memory stores."""
    app.dependency_overrides[get_rating_store] = lambda: store
    app.dependency_overrides[get_comment_store] = lambda: comment_store
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
