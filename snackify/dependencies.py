"""Store handles shared by the routes.

Stores are created once per process (on startup, or on first use when the
lifespan did not run) and injected with FastAPI's Depends, so tests can
swap them via app.dependency_overrides.
"""

import logging
import threading

from snackify.settings import get_settings
from snackify.stores.comments import CommentStore
from snackify.stores.kv import KeyValueStorage, build_storage
from snackify.stores.ratings import RatingStore

logger = logging.getLogger("uvicorn.error")

_storage: KeyValueStorage | None = None
_rating_store: RatingStore | None = None
_comment_store: CommentStore | None = None
# Sync handlers run in a thread pool; first requests may race to initialize
_init_lock = threading.RLock()


def init_stores() -> None:
    """Build the configured storage backend and the stores on top of it.

    Both stores share one backend instance, and with it the backend's lock.
    """
    global _storage, _rating_store, _comment_store

    with _init_lock:
        settings = get_settings()
        storage = build_storage(settings)
        storage.ping()

        _storage = storage
        _rating_store = RatingStore(
            storage,
            key=settings.ratings_key,
            strict=settings.strict_ratings,
        )
        _comment_store = CommentStore(storage, key=settings.comments_key)
    logger.info(f"Stores initialized ({settings.storage_backend} backend)")


def close_stores() -> None:
    """Release the storage backend."""
    global _storage, _rating_store, _comment_store
    with _init_lock:
        if _storage:
            _storage.close()
        _storage = None
        _rating_store = None
        _comment_store = None


def _ensure_stores() -> None:
    if _rating_store is None or _comment_store is None:
        with _init_lock:
            if _rating_store is None or _comment_store is None:
                init_stores()


def get_rating_store() -> RatingStore:
    _ensure_stores()
    return _rating_store


def get_comment_store() -> CommentStore:
    _ensure_stores()
    return _comment_store
