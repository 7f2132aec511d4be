"""Comment store.

Same persistence contract as the rating store: one JSON blob per storage
key, append-only lists per snack, whole-blob rewrite on every append.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging

from snackify.models import Comment
from snackify.stores.kv import KeyValueStorage
from snackify.stores.ratings import now_ms

logger = logging.getLogger("uvicorn.error")

COMMENTS_KEY = "snackifyComments"
ANONYMOUS_AUTHOR = "Anonymous"


class InvalidCommentError(ValueError):
    pass


class CommentStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = COMMENTS_KEY,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.storage = storage
        self.key = key
        self._clock = clock

    def _load(self) -> dict[str, list[Comment]]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("comments blob must be an object")
            return {
                str(snack_id): [Comment.from_dict(entry) for entry in entries]
                for snack_id, entries in data.items()
            }
        except (ValueError, KeyError, TypeError, OverflowError) as e:
            logger.warning(f"Stored comments under {self.key!r} are corrupt, treating as empty: {e}")
            return {}

    def get_comments(self, snack_id: str) -> list[Comment]:
        """Get comments for a snack, oldest first."""
        return self._load().get(snack_id, [])

    def add_comment(self, snack_id: str, text: str, author: str | None = None) -> Comment:
        """Append a comment and persist all comments.

        Raises:
            InvalidCommentError: Text is empty after stripping.
            StoreUnavailableError: The storage medium failed.
        """
        text = (text or "").strip()
        if not text:
            raise InvalidCommentError("Comment text must not be empty")
        author = (author or "").strip() or ANONYMOUS_AUTHOR

        with self.storage.lock:
            comments = self._load()
            comment = Comment(author=author, text=text, submitted_at=self._clock())
            comments.setdefault(snack_id, []).append(comment)
            self.storage.set_item(
                self.key,
                json.dumps(
                    {sid: [c.to_dict() for c in entries] for sid, entries in comments.items()}
                ),
            )
        return comment
