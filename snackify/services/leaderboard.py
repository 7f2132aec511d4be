"""Leaderboard service for top-rated snacks.

Ranking logic:
1. Sort by overall average DESC (user ratings, else seeded default)
2. Then by user rating count DESC (more votes breaks ties)
3. Then by name ASC

Snacks scoring 0 (no user ratings and no seeded default) or NaN are left out.
"""

from collections.abc import Iterable
from dataclasses import dataclass
import math

from snackify.models import AverageRatings, Snack
from snackify.services.rating import overall_average, round_tenths
from snackify.stores.ratings import RatingStore

MAX_LEADERBOARD_SIZE = 10


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    snack: Snack
    score: float
    averages: AverageRatings | None


def build_leaderboard(
    snacks: Iterable[Snack],
    store: RatingStore,
    limit: int = MAX_LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """Rank snacks by display score.

    Args:
        snacks: Candidate snacks (usually the whole catalog).
        store: Rating store supplying user averages.
        limit: Maximum number of entries (capped at MAX_LEADERBOARD_SIZE).

    Returns:
        Entries ranked from 1, best first.
    """
    scored = []
    for snack in snacks:
        averages = store.compute_averages(snack.id)
        score = overall_average(snack, store)
        if not score or math.isnan(score):
            continue
        scored.append((snack, score, averages))

    scored.sort(
        key=lambda item: (
            -item[1],
            -(item[2].count if item[2] else 0),
            item[0].name.lower(),
        )
    )

    return [
        LeaderboardEntry(rank=rank, snack=snack, score=round_tenths(score), averages=averages)
        for rank, (snack, score, averages) in enumerate(
            scored[: min(limit, MAX_LEADERBOARD_SIZE)], start=1
        )
    ]
