"""Snack catalog records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SeededRatings:
    """Default scores shipped with the catalog, used until users rate a snack."""

    taste: float
    spiciness: float
    uniqueness: float
    count: int = 0


@dataclass(frozen=True)
class Snack:
    id: str
    name: str
    country: str
    category: str
    description: str = ""
    image: str | None = None
    ratings: SeededRatings | None = None
