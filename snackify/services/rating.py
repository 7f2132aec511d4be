"""Rating score helpers.

- round_tenths: the one rounding policy used for every average
- coerce_int: lenient integer parsing of raw form values
- overall_average: single display score with a strict fallback chain
  (user submissions > seeded default > 0)
- default_form_values: initial slider positions for the rating form
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

from snackify.models import Snack
from snackify.models.rating import MAX_RATING_VALUE

if TYPE_CHECKING:
    from snackify.stores.ratings import RatingStore

# Slider positions when a snack carries no usable seeded score
DEFAULT_FORM_VALUES = {"taste": 3, "spiciness": 1, "uniqueness": 3}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class InvalidRatingError(ValueError):
    pass


def round_tenths(value: float) -> float:
    """Round to one decimal place, halves away from zero.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.copysign(math.floor(abs(value) * 10 + 0.5), value) / 10


def coerce_int(value: Any) -> int | float:
    """Coerce a raw form value to an integer.

    Ints pass through, finite floats truncate toward zero, strings parse
    their leading integer ("4.7" -> 4, " 5 stars" -> 5). Anything else,
    including integers beyond MAX_RATING_VALUE, yields math.nan.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int):
        return _bounded(value)
    if isinstance(value, float):
        return _bounded(int(value)) if math.isfinite(value) else math.nan
    if value is None:
        return math.nan
    match = _LEADING_INT.match(str(value))
    if not match:
        return math.nan
    digits = match.group(1)
    # Longer digit runs are past MAX_RATING_VALUE anyway
    if len(digits.lstrip("+-").lstrip("0")) > 16:
        return math.nan
    return _bounded(int(digits))


def _bounded(value: int) -> int | float:
    return value if abs(value) <= MAX_RATING_VALUE else math.nan


def overall_average(snack: Snack, store: RatingStore) -> float:
    """Get the display score for a snack.

    Uses the user-submission averages when any exist, otherwise the seeded
    default when it has a positive count, otherwise 0. Tiers are never mixed.
    """
    averages = store.compute_averages(snack.id)
    if averages is not None:
        return averages.overall

    seeded = snack.ratings
    if seeded is not None and seeded.count > 0:
        return (seeded.taste + seeded.spiciness + seeded.uniqueness) / 3

    return 0


def default_form_values(snack: Snack | None) -> dict[str, int]:
    """Initial slider values for rating a snack.

    Seeded scores are rounded to the nearest step; a missing snack, a snack
    without seeded scores, or a score rounding to 0 falls back to
    DEFAULT_FORM_VALUES.
    """
    values = dict(DEFAULT_FORM_VALUES)
    if snack is None or snack.ratings is None:
        return values

    for field in values:
        seeded = getattr(snack.ratings, field)
        rounded = math.floor(seeded + 0.5) if math.isfinite(seeded) else 0
        if rounded:
            values[field] = int(rounded)
    return values
