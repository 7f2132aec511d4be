"""Key-value storage backends.

The rating and comment stores persist their state as a single serialized
blob per key, read and written wholesale. Backends only need the small
`get_item` / `set_item` surface of the browser's localStorage API:

- MemoryStorage: per-process dict (tests, local dev)
- FileStorage: one JSON document on disk, rewritten atomically
- RedisStorage: GET/SET against a Redis server

All I/O failures are raised as StoreUnavailableError. Each backend owns a
reentrant `lock`; every store sharing the backend holds it across its
read-modify-write so appends to different keys cannot overwrite each other.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
import threading
from typing import Protocol

import redis

from snackify.settings import Settings

logger = logging.getLogger("uvicorn.error")

# Key prefix used on shared Redis instances
PREFIX_REDIS = "snackify:"


class RatingStoreError(RuntimeError):
    pass


class StoreUnavailableError(RatingStoreError):
    """The storage medium could not be read or written."""


class KeyValueStorage(Protocol):
    lock: threading.RLock

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def ping(self) -> None: ...

    def close(self) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Contents live as long as the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})
        self.lock = threading.RLock()

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self.lock:
            self._items[key] = value

    def ping(self) -> None:
        return None

    def close(self) -> None:
        return None


class FileStorage:
    """Single JSON document mapping keys to string values.

    Every write replaces the whole file via a temp file and os.replace,
    so readers see either the old or the new document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.lock = threading.RLock()

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Storage file {self.path} is not valid JSON, treating as empty")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, treating as empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        with self.lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self.lock:
            items = self._read_all()
            items[key] = value
            self._write_all(items)

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(items, fh)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreUnavailableError(f"Cannot write {self.path}: {e}") from e

    def ping(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Storage directory unavailable: {e}") from e
        if not os.access(self.path.parent, os.W_OK):
            raise StoreUnavailableError(f"Storage directory {self.path.parent} is not writable")

    def close(self) -> None:
        return None


class RedisStorage:
    """Synchronous Redis client storing each key as a plain string."""

    def __init__(self, url: str, client: redis.Redis | None = None) -> None:
        self.url = url
        self.lock = threading.RLock()
        self._client = client or redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )

    def get_item(self, key: str) -> str | None:
        try:
            return self._client.get(f"{PREFIX_REDIS}{key}")
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis GET failed: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self._client.set(f"{PREFIX_REDIS}{key}", value)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis SET failed: {e}") from e

    def ping(self) -> None:
        try:
            self._client.ping()
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis unreachable: {e}") from e
        logger.info("Redis connected")

    def close(self) -> None:
        self._client.close()


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the storage backend selected in settings."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "redis":
        return RedisStorage(settings.redis_url)
    return FileStorage(settings.storage_path)
