import json
import math

import pytest

from snackify.models import AverageRatings, RatingSubmission
from snackify.services.rating import InvalidRatingError
from snackify.stores.kv import MemoryStorage, StoreUnavailableError
from snackify.stores.ratings import RATINGS_KEY, RatingStore, deserialize_ratings, serialize_ratings


def test_unrated_snack_has_no_ratings_or_averages(store: RatingStore, storage: MemoryStorage) -> None:
    assert store.get_ratings("1") is None
    assert store.compute_averages("1") is None
    # Reading must not create an entry
    assert storage.get_item(RATINGS_KEY) is None


def test_single_rating_averages(store: RatingStore) -> None:
    averages = store.submit_rating("1", 3, 1, 3)
    assert averages == AverageRatings(taste=3.0, spiciness=1.0, uniqueness=3.0, count=1)


def test_two_ratings_average_to_halves(store: RatingStore) -> None:
    store.submit_rating("1", 4, 2, 5)
    averages = store.submit_rating("1", 5, 1, 4)
    assert averages == AverageRatings(taste=4.5, spiciness=1.5, uniqueness=4.5, count=2)
    assert store.compute_averages("1") == averages


def test_averages_round_to_one_decimal(store: RatingStore) -> None:
    store.submit_rating("1", 5, 1, 2)
    store.submit_rating("1", 5, 1, 2)
    averages = store.submit_rating("1", 4, 2, 2)
    # 14/3 = 4.666..., 4/3 = 1.333...
    assert averages.taste == 4.7
    assert averages.spiciness == 1.3
    assert averages.uniqueness == 2.0


def test_count_matches_number_of_submissions(store: RatingStore) -> None:
    for n in range(1, 8):
        averages = store.submit_rating("2", n % 5 + 1, 1, 1)
        assert averages.count == n
    assert store.compute_averages("2").count == 7


def test_submissions_are_appended_in_order(store: RatingStore) -> None:
    store.submit_rating("1", 1, 1, 1)
    before = store.get_ratings("1")

    store.submit_rating("1", 5, 4, 3)
    after = store.get_ratings("1")

    assert len(after) == len(before) + 1
    assert after[:-1] == before
    assert (after[-1].taste, after[-1].spiciness, after[-1].uniqueness) == (5, 4, 3)
    assert after[-1].submitted_at > after[0].submitted_at


def test_snacks_are_kept_separate(store: RatingStore) -> None:
    store.submit_rating("1", 5, 5, 5)
    store.submit_rating("2", 1, 1, 1)
    assert store.compute_averages("1").taste == 5.0
    assert store.compute_averages("2").taste == 1.0


def test_persisted_layout(store: RatingStore, storage: MemoryStorage) -> None:
    store.submit_rating("7", "4", 2.9, 5)
    data = json.loads(storage.get_item(RATINGS_KEY))
    assert data == {
        "7": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": 1_700_000_000_000}]
    }


def test_reload_reproduces_sequence(store: RatingStore, storage: MemoryStorage) -> None:
    store.submit_rating("1", 4, 2, 5)
    store.submit_rating("1", 5, 1, 4)
    store.submit_rating("3", 2, 2, 2)

    reloaded = RatingStore(MemoryStorage({RATINGS_KEY: storage.get_item(RATINGS_KEY)}))
    assert reloaded.get_ratings("1") == store.get_ratings("1")
    assert reloaded.get_ratings("3") == store.get_ratings("3")


def test_deserialize_reads_browser_blob() -> None:
    raw = '{"1": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": 1712000000000}]}'
    ratings = deserialize_ratings(raw)
    assert ratings["1"] == [
        RatingSubmission(taste=4, spiciness=2, uniqueness=5, submitted_at=1712000000000)
    ]
    assert json.loads(serialize_ratings(ratings)) == json.loads(raw)


def test_corrupt_blob_is_treated_as_empty(storage: MemoryStorage) -> None:
    storage.set_item(RATINGS_KEY, "{not json")
    store = RatingStore(storage)

    assert store.get_ratings("1") is None
    assert store.last_load_error is not None

    averages = store.submit_rating("1", 3, 1, 3)
    assert averages.count == 1
    assert store.get_ratings("1")[0].taste == 3
    assert store.last_load_error is None
    assert json.loads(storage.get_item(RATINGS_KEY))["1"][0]["taste"] == 3


@pytest.mark.parametrize(
    "blob",
    [
        "[]",
        '{"1": {"taste": 4}}',
        '{"1": [{"taste": 4, "spiciness": 2}]}',
        '{"1": [{"taste": "4", "spiciness": 2, "uniqueness": 5, "timestamp": 1}]}',
        '{"1": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": Infinity}]}',
        '{"1": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": 100000000000000000000}]}',
        '{"1": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": -1}]}',
        '{"1": [{"taste": 1' + "0" * 400 + ', "spiciness": 2, "uniqueness": 5, "timestamp": 1}]}',
        '{"1": [{"taste": -Infinity, "spiciness": 2, "uniqueness": 5, "timestamp": 1}]}',
        '{"1": [{"taste": 1e400, "spiciness": 2, "uniqueness": 5, "timestamp": 1}]}',
    ],
)
def test_malformed_layout_is_treated_as_empty(storage: MemoryStorage, blob: str) -> None:
    storage.set_item(RATINGS_KEY, blob)
    store = RatingStore(storage)
    assert store.compute_averages("1") is None
    assert store.last_load_error


def test_strict_mode_rejects_non_integers(store: RatingStore, storage: MemoryStorage) -> None:
    with pytest.raises(InvalidRatingError, match="spiciness"):
        store.submit_rating("1", 3, "hot", 3)
    assert storage.get_item(RATINGS_KEY) is None


def test_permissive_mode_stores_nan_as_null(storage: MemoryStorage, clock) -> None:
    store = RatingStore(storage, strict=False, clock=clock)
    averages = store.submit_rating("1", "abc", 2, 3)

    assert math.isnan(averages.taste)
    assert averages.spiciness == 2.0
    assert averages.count == 1
    assert json.loads(storage.get_item(RATINGS_KEY))["1"][0]["taste"] is None
    assert math.isnan(store.get_ratings("1")[0].taste)


def test_on_success_receives_new_averages(store: RatingStore) -> None:
    received: list[AverageRatings] = []
    averages = store.submit_rating("1", 2, 2, 2, on_success=received.append)
    assert received == [averages]


def test_storage_failure_propagates(clock) -> None:
    class BrokenStorage(MemoryStorage):
        def set_item(self, key: str, value: str) -> None:
            raise StoreUnavailableError("disk full")

    store = RatingStore(BrokenStorage(), clock=clock)
    received: list[AverageRatings] = []
    with pytest.raises(StoreUnavailableError):
        store.submit_rating("1", 3, 3, 3, on_success=received.append)
    assert received == []
    assert store.get_ratings("1") is None
