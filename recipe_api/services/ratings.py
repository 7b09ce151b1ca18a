"""Recipe rating aggregation."""

import math
from collections.abc import Sequence

from recipe_api.schemas.rating import RatingOut, RatingSummary


def round_half_up(value: float, digits: int = 1) -> float:
    """Round half up for non-negative values: 4.25 -> 4.3, 4.24 -> 4.2."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def summarize_ratings(ratings: Sequence[RatingOut]) -> RatingSummary:
    """
    Average and count for a recipe's ratings.

    An unrated recipe has average_rating 0.0 and total_ratings 0.
    """
    if not ratings:
        return RatingSummary(average_rating=0.0, total_ratings=0, ratings=[])
    average = sum(r.rating for r in ratings) / len(ratings)
    return RatingSummary(
        average_rating=round_half_up(average),
        total_ratings=len(ratings),
        ratings=list(ratings),
    )
