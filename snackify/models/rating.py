"""Rating records.

Persisted layout of one submission (bit-exact with the browser client):

    {"taste": <int>, "spiciness": <int>, "uniqueness": <int>, "timestamp": <ms>}

A value that failed integer coercion is NaN in memory and `null` on disk.
Loading rejects values no browser client could have written: infinities,
integers beyond Number.MAX_SAFE_INTEGER and timestamps outside the range
a datetime can represent.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

RATING_FIELDS = ("taste", "spiciness", "uniqueness")

# Number.MAX_SAFE_INTEGER; larger values lose precision in the browser
MAX_RATING_VALUE = 2**53 - 1

# 9999-12-31T00:00:00Z, below datetime.max in any timezone
MAX_TIMESTAMP_MS = 253_402_214_400_000


def _dump_value(value: int | float) -> int | None:
    if isinstance(value, float) and math.isnan(value):
        return None
    return int(value)


def _load_value(value: Any) -> int | float:
    if value is None:
        return math.nan
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"rating value must be a number, got {type(value).__name__}")
    if isinstance(value, float):
        if math.isnan(value):
            return value
        if not math.isfinite(value) or not value.is_integer():
            raise TypeError(f"rating value must be an integer, got {value}")
    if abs(value) > MAX_RATING_VALUE:
        raise TypeError("rating value out of range")
    return int(value)


def load_timestamp(value: Any) -> int:
    """Validate a persisted millisecond timestamp.

    Raises:
        TypeError: Not a finite number within 0..MAX_TIMESTAMP_MS.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError("timestamp must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise TypeError(f"timestamp must be finite, got {value}")
    if not 0 <= value <= MAX_TIMESTAMP_MS:
        raise TypeError("timestamp out of range")
    return int(value)


@dataclass(frozen=True)
class RatingSubmission:
    """One user-provided (taste, spiciness, uniqueness) triple."""

    taste: int | float
    spiciness: int | float
    uniqueness: int | float
    submitted_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "taste": _dump_value(self.taste),
            "spiciness": _dump_value(self.spiciness),
            "uniqueness": _dump_value(self.uniqueness),
            "timestamp": self.submitted_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RatingSubmission:
        if not isinstance(data, dict):
            raise TypeError("rating submission must be an object")
        return cls(
            taste=_load_value(data["taste"]),
            spiciness=_load_value(data["spiciness"]),
            uniqueness=_load_value(data["uniqueness"]),
            submitted_at=load_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class AverageRatings:
    """Per-field means over all submissions for a snack, one decimal place."""

    taste: float
    spiciness: float
    uniqueness: float
    count: int

    @property
    def overall(self) -> float:
        return (self.taste + self.spiciness + self.uniqueness) / 3
