"""Rating store.

Append-only mapping from snack id to its rating submissions, persisted as
one JSON blob under a single storage key:

    { "<snackId>": [ {"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": 1700000000000}, ... ] }

Every operation reads the blob from the storage medium; every submission
re-serializes the whole mapping and writes it back before returning, holding
the storage's lock so other stores on the same medium cannot interleave.
Across processes sharing one medium the last writer wins.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import math
import time

from snackify.models import AverageRatings, RatingSubmission
from snackify.models.rating import RATING_FIELDS
from snackify.services.rating import InvalidRatingError, coerce_int, round_tenths
from snackify.stores.kv import KeyValueStorage

logger = logging.getLogger("uvicorn.error")

RATINGS_KEY = "snackifyRatings"

RatingMap = dict[str, list[RatingSubmission]]


def now_ms() -> int:
    return int(time.time() * 1000)


def serialize_ratings(ratings: RatingMap) -> str:
    """Serialize a rating map to the persisted JSON layout."""
    return json.dumps(
        {snack_id: [entry.to_dict() for entry in entries] for snack_id, entries in ratings.items()}
    )


def deserialize_ratings(raw: str) -> RatingMap:
    """Parse the persisted JSON layout.

    Raises:
        ValueError: If the blob is not valid JSON or does not match the layout.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("ratings blob must be an object")

    ratings: RatingMap = {}
    for snack_id, entries in data.items():
        if not isinstance(entries, list):
            raise ValueError(f"ratings for {snack_id!r} must be a list")
        try:
            ratings[str(snack_id)] = [RatingSubmission.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, OverflowError) as e:
            raise ValueError(f"malformed rating for {snack_id!r}: {e}") from e
    return ratings


class RatingStore:
    """Durable per-snack rating submissions plus their averages.

    Args:
        storage: Key-value medium holding the serialized blob.
        key: Storage key of the blob.
        strict: Reject values that fail integer coercion instead of storing NaN.
        clock: Returns the current time in milliseconds since epoch.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = RATINGS_KEY,
        strict: bool = True,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.storage = storage
        self.key = key
        self.strict = strict
        self._clock = clock
        self.last_load_error: str | None = None

    def _load(self) -> RatingMap:
        raw = self.storage.get_item(self.key)
        if not raw:
            return {}
        try:
            ratings = deserialize_ratings(raw)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            self.last_load_error = str(e)
            logger.warning(f"Stored ratings under {self.key!r} are corrupt, treating as empty: {e}")
            return {}
        self.last_load_error = None
        return ratings

    def _save(self, ratings: RatingMap) -> None:
        self.storage.set_item(self.key, serialize_ratings(ratings))

    def get_ratings(self, snack_id: str) -> list[RatingSubmission] | None:
        """Get submissions for a snack in submission order, or None if unrated."""
        return self._load().get(snack_id)

    def compute_averages(self, snack_id: str) -> AverageRatings | None:
        """Compute per-field means for a snack.

        Returns:
            AverageRatings rounded to one decimal, or None when the snack has no
            submissions (distinct from a measured zero).
        """
        entries = self._load().get(snack_id)
        if not entries:
            return None
        return _average(entries)

    def submit_rating(
        self,
        snack_id: str,
        taste: object,
        spiciness: object,
        uniqueness: object,
        *,
        on_success: Callable[[AverageRatings], None] | None = None,
    ) -> AverageRatings:
        """Append a submission and persist the whole store.

        Raw values go through coerce_int. In strict mode a value that fails
        coercion raises InvalidRatingError and nothing is written.

        Returns:
            Averages over the updated submissions, also passed to on_success.

        Raises:
            InvalidRatingError: Strict mode and a value is not an integer.
            StoreUnavailableError: The storage medium failed.
        """
        values = {
            "taste": coerce_int(taste),
            "spiciness": coerce_int(spiciness),
            "uniqueness": coerce_int(uniqueness),
        }
        if self.strict:
            invalid = [name for name in RATING_FIELDS if math.isnan(values[name])]
            if invalid:
                raise InvalidRatingError(f"Rating values must be integers: {', '.join(invalid)}")

        with self.storage.lock:
            ratings = self._load()
            entries = ratings.setdefault(snack_id, [])
            entries.append(RatingSubmission(submitted_at=self._clock(), **values))
            self._save(ratings)
            averages = _average(entries)

        logger.info(f"Rating stored for snack {snack_id} ({averages.count} total)")
        if on_success is not None:
            on_success(averages)
        return averages


def _average(entries: list[RatingSubmission]) -> AverageRatings:
    count = len(entries)
    totals = {name: 0 for name in RATING_FIELDS}
    for entry in entries:
        for name in RATING_FIELDS:
            totals[name] += getattr(entry, name)
    return AverageRatings(
        taste=round_tenths(totals["taste"] / count),
        spiciness=round_tenths(totals["spiciness"] / count),
        uniqueness=round_tenths(totals["uniqueness"] / count),
        count=count,
    )
