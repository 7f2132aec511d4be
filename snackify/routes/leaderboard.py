"""Leaderboard endpoint.

GET /leaderboard - Top-rated snacks (<= 10), best first.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from snackify.dependencies import get_rating_store
from snackify.schemas import LeaderboardEntryOut, LeaderboardResponse
from snackify.services.catalog import SNACKS
from snackify.services.leaderboard import MAX_LEADERBOARD_SIZE, build_leaderboard
from snackify.stores.ratings import RatingStore

router = APIRouter()


@router.get("", response_model=LeaderboardResponse)
def get_leaderboard(
    limit: int = Query(
        default=MAX_LEADERBOARD_SIZE,
        ge=1,
        le=MAX_LEADERBOARD_SIZE,
        description="Number of entries to return (1-10)",
    ),
    store: RatingStore = Depends(get_rating_store),
) -> LeaderboardResponse:
    """Rank catalog snacks by overall average."""
    entries = build_leaderboard(SNACKS, store, limit=limit)
    return LeaderboardResponse(
        entries=[
            LeaderboardEntryOut(
                rank=entry.rank,
                snack_id=entry.snack.id,
                name=entry.snack.name,
                country=entry.snack.country,
                score=entry.score,
                rating_count=entry.averages.count if entry.averages else 0,
            )
            for entry in entries
        ],
        last_updated_at=datetime.now(timezone.utc),
    )
