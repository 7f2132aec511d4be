"""Tests for snack, rating, comment and leaderboard endpoints."""

import pytest
from httpx import AsyncClient

from snackify.dependencies import get_rating_store
from snackify.main import app
from snackify.stores.kv import MemoryStorage, StoreUnavailableError
from snackify.stores.ratings import RATINGS_KEY, RatingStore


@pytest.mark.asyncio
async def test_list_snacks_with_filters(client: AsyncClient):
    response = await client.get("/snacks")
    assert response.status_code == 200
    snacks = response.json()
    assert len(snacks) == 8
    assert {"id", "name", "overallAverage", "averages", "ratings"} <= set(snacks[0])

    response = await client.get("/snacks", params={"country": "mexico"})
    assert [s["name"] for s in response.json()] == ["Takis Fuego", "Chapulines"]

    response = await client.get("/snacks", params={"category": "sweets", "search": "waffle"})
    assert [s["id"] for s in response.json()] == ["7"]


@pytest.mark.asyncio
async def test_get_snack_uses_seeded_default_until_rated(client: AsyncClient):
    response = await client.get("/snacks/1")
    assert response.status_code == 200
    data = response.json()
    assert data["averages"] is None
    assert data["overallAverage"] == pytest.approx(4.2)

    await client.post("/snacks/1/ratings", json={"taste": 3, "spiciness": 1, "uniqueness": 3})

    data = (await client.get("/snacks/1")).json()
    assert data["averages"] == {"taste": 3.0, "spiciness": 1.0, "uniqueness": 3.0, "count": 1}
    assert data["overallAverage"] == pytest.approx(7 / 3)


@pytest.mark.asyncio
async def test_unknown_snack_is_404(client: AsyncClient):
    response = await client.get("/snacks/999")
    assert response.status_code == 404
    assert response.json()["error"] == {
        "code": "SNACK_NOT_FOUND",
        "message": "Snack 999 not found",
        "detail": {"snack_id": "999"},
    }

    response = await client.post(
        "/snacks/999/ratings", json={"taste": 3, "spiciness": 1, "uniqueness": 3}
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SNACK_NOT_FOUND"


@pytest.mark.asyncio
async def test_unknown_route_keeps_default_404_body(client: AsyncClient):
    response = await client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


@pytest.mark.asyncio
async def test_out_of_range_stored_timestamp_reads_as_unrated(client: AsyncClient, storage: MemoryStorage):
    storage.set_item(
        RATINGS_KEY,
        '{"1": [{"taste": 4, "spiciness": 2, "uniqueness": 5, "timestamp": 100000000000000000000}]}',
    )
    response = await client.get("/snacks/1/ratings")
    assert response.status_code == 200
    assert response.json()["ratings"] == []
    assert response.json()["averages"] is None


@pytest.mark.asyncio
async def test_submit_ratings_returns_new_averages(client: AsyncClient, store: RatingStore):
    first = await client.post(
        "/snacks/2/ratings", json={"taste": 4, "spiciness": 2, "uniqueness": 5}
    )
    assert first.status_code == 201

    second = await client.post(
        "/snacks/2/ratings", json={"taste": 5, "spiciness": 1, "uniqueness": 4}
    )
    assert second.status_code == 201
    assert second.json() == {
        "snackId": "2",
        "averages": {"taste": 4.5, "spiciness": 1.5, "uniqueness": 4.5, "count": 2},
        "overallAverage": pytest.approx(3.5),
    }
    assert len(store.get_ratings("2")) == 2


@pytest.mark.asyncio
async def test_get_ratings_lists_submissions(client: AsyncClient):
    response = await client.get("/snacks/5/ratings")
    assert response.status_code == 200
    data = response.json()
    assert data["ratings"] == []
    assert data["averages"] is None
    # Seeded 2.8 / 1.0 / 4.9 rounded
    assert data["formDefaults"] == {"taste": 3, "spiciness": 1, "uniqueness": 5}

    await client.post("/snacks/5/ratings", json={"taste": 2, "spiciness": 1, "uniqueness": 5})
    await client.post("/snacks/5/ratings", json={"taste": 1, "spiciness": 1, "uniqueness": 4})

    data = (await client.get("/snacks/5/ratings")).json()
    assert [(r["taste"], r["uniqueness"]) for r in data["ratings"]] == [(2, 5), (1, 4)]
    assert data["ratings"][0]["submittedAt"].startswith("2023-11-14T22:13:20")
    assert data["averages"]["count"] == 2


@pytest.mark.asyncio
async def test_unrated_snack_without_seed_gets_default_form_values(client: AsyncClient):
    data = (await client.get("/snacks/8/ratings")).json()
    assert data["formDefaults"] == {"taste": 3, "spiciness": 1, "uniqueness": 3}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"taste": 0, "spiciness": 1, "uniqueness": 3},
        {"taste": 6, "spiciness": 1, "uniqueness": 3},
        {"taste": "hot", "spiciness": 1, "uniqueness": 3},
        {"taste": 3, "spiciness": 1},
    ],
)
async def test_invalid_rating_payload_is_rejected(client: AsyncClient, store: RatingStore, payload):
    response = await client.post("/snacks/1/ratings", json=payload)
    assert response.status_code == 422
    assert store.get_ratings("1") is None


@pytest.mark.asyncio
async def test_storage_failure_returns_503(client: AsyncClient, clock):
    class BrokenStorage(MemoryStorage):
        def get_item(self, key: str) -> str | None:
            raise StoreUnavailableError("redis down")

    app.dependency_overrides[get_rating_store] = lambda: RatingStore(BrokenStorage(), clock=clock)

    response = await client.post(
        "/snacks/1/ratings", json={"taste": 3, "spiciness": 1, "uniqueness": 3}
    )
    assert response.status_code == 503
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_comments_round_trip(client: AsyncClient):
    assert (await client.get("/snacks/3/comments")).json() == []

    response = await client.post("/snacks/3/comments", json={"text": "So airy", "author": "Jin"})
    assert response.status_code == 201
    assert response.json()["author"] == "Jin"

    await client.post("/snacks/3/comments", json={"text": "Pairs with beer"})

    comments = (await client.get("/snacks/3/comments")).json()
    assert [(c["author"], c["text"]) for c in comments] == [
        ("Jin", "So airy"),
        ("Anonymous", "Pairs with beer"),
    ]


@pytest.mark.asyncio
async def test_blank_comment_is_rejected(client: AsyncClient):
    response = await client.post("/snacks/3/comments", json={"text": "   "})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_COMMENT"


@pytest.mark.asyncio
async def test_leaderboard(client: AsyncClient):
    response = await client.get("/leaderboard")
    assert response.status_code == 200
    data = response.json()
    # Chapulines has neither user ratings nor a seeded default
    assert len(data["entries"]) == 7
    assert data["entries"][0]["rank"] == 1
    assert "lastUpdatedAt" in data

    for _ in range(3):
        await client.post("/snacks/8/ratings", json={"taste": 5, "spiciness": 5, "uniqueness": 5})

    data = (await client.get("/leaderboard", params={"limit": 2})).json()
    assert len(data["entries"]) == 2
    assert data["entries"][0]["snackId"] == "8"
    assert data["entries"][0]["score"] == 5.0
    assert data["entries"][0]["ratingCount"] == 3


@pytest.mark.asyncio
async def test_leaderboard_limit_is_bounded(client: AsyncClient):
    response = await client.get("/leaderboard", params={"limit": 11})
    assert response.status_code == 422
